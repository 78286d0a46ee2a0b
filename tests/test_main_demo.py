"""
Unit tests for the CLI helpers and driver loop in face_counter.main_demo
"""
import cv2
import numpy as np
import pytest

from face_counter import main_demo
from face_counter.config import PipelineConfig
from face_counter.main_demo import build_config, main, parse_args, run_demo
from face_counter.overlay import ERROR_BG

W, H = 160, 120
N_FRAMES = 5


@pytest.fixture
def video_file(tmp_path):
    """Short synthetic clip on disk."""
    path = tmp_path / "clip.avi"
    writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*"MJPG"), 10, (W, H))
    for i in range(N_FRAMES):
        frame = np.full((H, W, 3), 40 * i, dtype=np.uint8)
        writer.write(frame)
    writer.release()
    return str(path)


@pytest.fixture
def shown(monkeypatch):
    """Replace the GUI calls and collect every frame passed to imshow."""
    frames = []
    monkeypatch.setattr(cv2, "imshow", lambda title, img: frames.append(img.copy()))
    monkeypatch.setattr(cv2, "waitKey", lambda delay=0: -1)
    monkeypatch.setattr(cv2, "destroyAllWindows", lambda: None)
    return frames


@pytest.fixture
def dummy_config(tmp_path):
    cfg = PipelineConfig()
    cfg.detection.backend = "dummy"
    cfg.logging.log_path = tmp_path / "logs" / "events.csv"
    return cfg


class TestBuildConfig:

    def test_defaults(self):
        cfg = build_config(parse_args([]))
        assert cfg.video.source == 0
        assert cfg.video.mirror is True
        assert cfg.tracking.proximity_threshold == 100
        assert cfg.tracking.max_miss_frames == 5

    def test_overrides(self):
        cfg = build_config(parse_args([
            "--video", "2", "--backend", "dummy", "--proximity", "60",
            "--max-miss", "3", "--line", "0.4", "--no-mirror", "--no-event-log",
        ]))
        assert cfg.video.source == 2
        assert cfg.detection.backend == "dummy"
        assert cfg.tracking.proximity_threshold == 60
        assert cfg.tracking.max_miss_frames == 3
        assert cfg.tracking.line_position == 0.4
        assert cfg.video.mirror is False
        assert cfg.logging.log_events is False

    def test_video_path(self):
        assert build_config(parse_args(["--video", "clip.mp4"])).video.source == "clip.mp4"

    def test_invalid_line_position(self):
        with pytest.raises(ValueError):
            build_config(parse_args(["--line", "2"]))

    def test_main_exits_on_invalid_config(self):
        with pytest.raises(SystemExit):
            main(["--max-miss", "-3"])


class TestRunDemo:

    def test_unopenable_source(self, tmp_path):
        with pytest.raises(RuntimeError):
            run_demo(PipelineConfig(), video_source=str(tmp_path / "missing.mp4"))

    def test_runs_every_frame(self, video_file, shown, dummy_config):
        run_demo(dummy_config, video_source=video_file)
        # loading banner + one frame per captured frame
        assert len(shown) == N_FRAMES + 1
        assert all(img.shape == (H, W, 3) for img in shown)
        # no faces, so no crossings were logged
        assert not dummy_config.logging.log_path.exists()

    def test_quit_key_stops_early(self, video_file, shown, dummy_config, monkeypatch):
        monkeypatch.setattr(cv2, "waitKey", lambda delay=0: ord("q"))
        run_demo(dummy_config, video_source=video_file)
        assert len(shown) == 2

    def test_detector_failure_shows_error_banner(self, video_file, shown, dummy_config, monkeypatch):
        def broken(config):
            raise RuntimeError("model download failed")

        monkeypatch.setattr(main_demo, "create_detector", broken)
        with pytest.raises(RuntimeError, match="model download failed"):
            run_demo(dummy_config, video_source=video_file)

        assert len(shown) == 2
        assert tuple(shown[-1][H - 2, W - 2]) == ERROR_BG
        assert tuple(shown[0][H - 2, W - 2]) != ERROR_BG
