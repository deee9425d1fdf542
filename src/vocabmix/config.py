import os

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


class Settings:
    PROJECT_NAME: str = "vocabmix"
    DEBUG: bool = os.environ.get("VOCABMIX_DEBUG", "0") == "1"
    HOST: str = os.environ.get("VOCABMIX_HOST", "127.0.0.1")
    PORT: int = int(os.environ.get("VOCABMIX_PORT", "8000"))
    ROOT_PATH: str = os.environ.get("ROOT_PATH", "")
    LOG_DIR: str = os.environ.get("VOCABMIX_LOG_DIR", "log")
    LOG_FILE: str = "vocabmix.log"
    DB_DIR: str = os.environ.get("VOCABMIX_DB_DIR", "db")
    DB_FILE: str = "vocabmix.db"
    VOCAB_DIR: str = os.environ.get("VOCABMIX_VOCAB_DIR", "vocabulary")
    TEMPLATES_DIR: str = os.path.join(PACKAGE_DIR, "templates")
    STATIC_DIR: str = os.path.join(PACKAGE_DIR, "static")
    MIN_WORDS: int = 4
    NUM_OPTIONS: int = 4
    ADVANCE_DELAY_MS: int = 1200
    DEFAULT_MODE: str = "mixed"
    INPUT_STORE_KEY: str = "vocabmix.raw_input"
    SPEECH_ENABLED: bool = os.environ.get("VOCABMIX_SPEECH", "1") == "1"
    SOURCE_LANG_NAME: str = os.environ.get("VOCABMIX_SOURCE_LANG", "English")
    TARGET_LANG_NAME: str = os.environ.get("VOCABMIX_TARGET_LANG", "Russian")
    SPEECH_LANG: str = "en"
    SPEECH_RATE: int = 170


settings = Settings()
