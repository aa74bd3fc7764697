
from dotenv import load_dotenv

# Pull API keys and catalog settings from .env before any module reads
# os.environ.
load_dotenv()
