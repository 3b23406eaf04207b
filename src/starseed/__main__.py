import sys

from starseed.app import main

sys.exit(main())
