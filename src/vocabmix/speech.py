"""
Text-to-speech for the source-language term of a question.

Speech is fire-and-forget: `speak` never blocks and never raises, and a new
utterance stops the one currently playing.
"""

import logging
import threading
from typing import Optional

import pyttsx3

from .config import settings
from .errors import MissingCapability

logger = logging.getLogger(__name__)


class Speaker:
    def speak(self, text: str) -> None:
        raise NotImplementedError


class NullSpeaker(Speaker):
    """Used when no speech engine is available."""

    def speak(self, text: str) -> None:
        pass


class Pyttsx3Speaker(Speaker):
    def __init__(self, lang: str = settings.SPEECH_LANG, rate: int = settings.SPEECH_RATE):
        try:
            self.engine = pyttsx3.init()
        except Exception as e:
            raise MissingCapability(f"No speech engine: {e}") from e
        self.engine.setProperty("rate", rate)
        voice_id = self._pick_voice(lang)
        if voice_id:
            self.engine.setProperty("voice", voice_id)

    def _pick_voice(self, lang: str) -> Optional[str]:
        """Picks the first voice whose id, name or languages mention `lang`."""
        for voice in self.engine.getProperty("voices") or []:
            vid = (getattr(voice, "id", "") or "").lower()
            name = (getattr(voice, "name", "") or "").lower()
            langs = [str(x).lower() for x in (getattr(voice, "languages", None) or [])]
            if lang in vid or lang in name or any(lang in x for x in langs):
                return voice.id
        return None

    def speak(self, text: str) -> None:
        if not text:
            return

        def run():
            try:
                self.engine.stop()
                self.engine.say(text)
                self.engine.runAndWait()
            except Exception as e:
                logger.debug(f"Speech failed for {text!r}: {e}")

        threading.Thread(target=run, daemon=True).start()


def create_speaker(enabled: Optional[bool] = None) -> Speaker:
    if enabled is None:
        enabled = settings.SPEECH_ENABLED
    if not enabled:
        return NullSpeaker()
    try:
        speaker = Pyttsx3Speaker()
    except MissingCapability as e:
        logger.info(f"Speech disabled: {e}")
        return NullSpeaker()
    logger.info("Speech engine ready.")
    return speaker
