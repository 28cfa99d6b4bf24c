import os
import sys
import logging

log_format = "[%(asctime)s] {%(pathname)s:%(lineno)d} %(levelname)s - %(message)s"
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
log_dir = os.getenv("LOG_DIR", os.path.join(project_root, "logs"))
log_path = os.path.join(log_dir, "lecturesummarizer.log")
os.makedirs(log_dir, exist_ok=True)

logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format=log_format,
    handlers=[
        logging.FileHandler(log_path, encoding="utf-8"),
        logging.StreamHandler(sys.stdout)
    ]
)

# Client libraries log every HTTP request at INFO
for noisy in ("httpx", "httpcore", "google_genai", "groq"):
    logging.getLogger(noisy).setLevel(logging.WARNING)

logging = logging.getLogger('lecturesummarizer')
