import os
from dotenv import load_dotenv

load_dotenv()

# --- LLM (Groq, OpenAI-compatible API) ---
GROQ_API_KEY = os.getenv("GROQ_API_KEY")
MODEL_NAME = os.getenv("MODEL_NAME", "llama-3.3-70b-versatile")
GROQ_API_URL = os.getenv("GROQ_API_URL", "https://api.groq.com/openai/v1/chat/completions")
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "60"))

# --- Storage ---
IS_HF = os.environ.get("SPACE_ID") is not None
BASE_DIR = os.getenv("BASE_DIR", "/tmp/data" if IS_HF else "data")
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{os.path.join(BASE_DIR, 'app.db')}")
RESUME_DIR = os.getenv("RESUME_DIR", os.path.join(BASE_DIR, "resumes"))

# --- Uploads ---
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))
ALLOWED_EXTENSIONS = {".pdf", ".docx", ".doc", ".txt"}

ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "*").split(",") if o.strip()]
