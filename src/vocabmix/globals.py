from fastapi.templating import Jinja2Templates

from .config import settings
from .session import QuizSession
from .storage import InputStore, SQLiteKeyValueStore
from .vocabulary import VocabularyManager

templates = Jinja2Templates(directory=settings.TEMPLATES_DIR)
vocab_manager = VocabularyManager(settings.VOCAB_DIR)
input_store = InputStore(SQLiteKeyValueStore())
quiz_session = QuizSession()
