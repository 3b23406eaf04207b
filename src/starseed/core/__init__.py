"""Pure, deterministic generators: PRNG, noise, planets and the tiled world."""
