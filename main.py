from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.core.log_config import setup_logging
from app.routes.user.user_routers import user_router
from app.routes.journey.journey_routers import journey_router
from app.routes.match.match_routers import match_router

setup_logging(settings.LOG_LEVEL)

app = FastAPI(title="SoulSync Matching API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(user_router)
app.include_router(journey_router)
app.include_router(match_router)


@app.get("/", response_class=HTMLResponse)
async def read_root():
    return """
    <html>
        <head>
            <title>SoulSync</title>
        </head>
        <body>
            <h1>SoulSync matching API</h1>
            <p>See the API documentation <a href="/docs">here</a>.</p>
        </body>
    </html>
    """
