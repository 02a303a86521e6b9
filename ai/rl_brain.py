"""RL Brain — обёртка для SB3 PPO-модели, реализующая интерфейс Brain."""

import logging
import os

import numpy as np

from ai.brain import Brain
from birds.hummingbird import HummingbirdAgent

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "models/hummingbird_ppo.zip"


class RLBrain(Brain):
    """
    Мозг, управляемый обученной PPO-моделью (stable-baselines3).

    Если файла модели нет — колибри просто висит на месте.
    """

    def __init__(self, model_path: str = None, deterministic: bool = True):
        self.model_path = model_path or DEFAULT_MODEL
        self.deterministic = deterministic
        self.model = None

        if os.path.exists(self.model_path):
            self._load_model(self.model_path)
        else:
            logger.warning("Model %s not found, RL brain will idle", self.model_path)

    def _load_model(self, path: str):
        """Загрузить обученную PPO модель."""
        from stable_baselines3 import PPO
        self.model = PPO.load(path, device="cpu")
        logger.info("Model loaded from %s", path)

    def decide_action(self, observation, agent=None):
        if self.model is None:
            return np.zeros(HummingbirdAgent.ACTION_SIZE, dtype=np.float32)

        action, _ = self.model.predict(np.asarray(observation, dtype=np.float32),
                                       deterministic=self.deterministic)
        return np.clip(np.asarray(action, dtype=np.float32), -1.0, 1.0)
