# ============================================================================
# FILE: audiovault/__main__.py
# ============================================================================
import uvicorn
from audiovault.config import settings

if __name__ == "__main__":
    uvicorn.run("audiovault.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
