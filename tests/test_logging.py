import csv
import json

from starseed.core.logging_utils import ExplorationLogger


def _rows(path):
    with path.open(newline="") as fh:
        return list(csv.reader(fh))


def test_creates_session_files(tmp_path):
    logger = ExplorationLogger(tmp_path, "demo")
    logger.close()
    assert logger.session_dir == tmp_path / "demo"
    assert _rows(logger.events_path) == [ExplorationLogger.EVENTS_HEADER]
    assert _rows(logger.selections_path) == [ExplorationLogger.SELECTIONS_HEADER]
    assert (tmp_path / "last_session.txt").read_text(encoding="utf-8") == "demo"


def test_rows_are_buffered_until_threshold(tmp_path):
    logger = ExplorationLogger(tmp_path, "buffered", events_flush_threshold=3)
    logger.log_event([0.5, "down", 1.0, 2.0, ""])
    logger.log_event([0.6, "up", 1.0, 2.0, ""])
    assert len(_rows(logger.events_path)) == 1
    logger.log_event([0.7, "click", 1.0, 2.0, ""])
    assert len(_rows(logger.events_path)) == 4
    logger.close()


def test_values_are_formatted_for_csv(tmp_path):
    with ExplorationLogger(tmp_path, "fmt") as logger:
        logger.log_event([1.0 / 3.0, "wheel", 10.0, 20.0, json.dumps({"scale": 1.1, "k": [1, 2]})])
        logger.log_selection([2.0, -1, 3, 7, 123, "rocky", 45.5, 0.25, True])
    assert logger.closed
    event = _rows(logger.events_path)[1]
    assert event[0] == "0.3333333333"
    assert json.loads(event[4]) == {"scale": 1.1, "k": [1, 2]}
    selection = _rows(logger.selections_path)[1]
    assert selection == ["2", "-1", "3", "7", "123", "rocky", "45.5", "0.25", "1"]


def test_duplicate_session_ids_get_suffix(tmp_path):
    first = ExplorationLogger(tmp_path, "same")
    second = ExplorationLogger(tmp_path, "same")
    first.close()
    second.close()
    assert second.session_id == "same_1"
    assert (tmp_path / "last_session.txt").read_text(encoding="utf-8") == "same_1"


def test_meta_and_idempotent_close(tmp_path):
    logger = ExplorationLogger(tmp_path)
    logger.write_meta({"config": {"seed": 1}, "viewport": (800, 600)})
    logger.close()
    logger.close()
    meta = json.loads(logger.meta_path.read_text(encoding="utf-8"))
    assert meta == {"config": {"seed": 1}, "viewport": [800, 600]}
    assert logger.session_id.endswith("_session")
