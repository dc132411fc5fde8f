"""Entry: start API server. Logging is configured in semaninha.api.app."""
import uvicorn

from semaninha.config import API_HOST, API_PORT

if __name__ == "__main__":
    uvicorn.run(
        "semaninha.api.app:app",
        host=API_HOST,
        port=API_PORT,
        reload=True,
    )
