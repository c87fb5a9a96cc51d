import uvicorn
from src.config.settings import settings

if __name__ == "__main__":
    print(f"🚀 Starting CGI Scene Engine API on {settings.api_host}:{settings.api_port}...")
    uvicorn.run(
        "api.server:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True
    )
