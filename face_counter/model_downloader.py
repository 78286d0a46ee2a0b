import logging
import urllib.request
from pathlib import Path
from typing import Union

from face_counter.config import BLAZE_FACE_MODEL, MODELS_DIR

logger = logging.getLogger(__name__)


class ModelDownloader:
    """Fetches MediaPipe model files into the local models directory."""

    MODELS = {
        BLAZE_FACE_MODEL: "https://storage.googleapis.com/mediapipe-models/face_detector/blaze_face_short_range/float16/1/blaze_face_short_range.tflite",
    }

    def __init__(self, models_dir: Union[str, Path] = MODELS_DIR):
        self.models_dir = Path(models_dir)

    def download_model(self, model_name: str, url: str) -> Path:
        """Download one model unless it is already on disk."""
        model_path = self.models_dir / model_name

        if model_path.exists():
            logger.debug("Model already present: %s", model_path)
            return model_path

        self.models_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Downloading %s ...", model_name)
        try:
            urllib.request.urlretrieve(url, model_path)
        except Exception:
            logger.exception("Failed to download %s", model_name)
            if model_path.exists():
                model_path.unlink()
            raise

        logger.info("Downloaded %s to %s", model_name, model_path)
        return model_path

    def ensure(self, model_name: str = BLAZE_FACE_MODEL) -> Path:
        if model_name not in self.MODELS:
            raise ValueError(f"Unknown model: {model_name}")
        return self.download_model(model_name, self.MODELS[model_name])


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    ModelDownloader().ensure()
