import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .database import init_db

# Import all models to ensure they're registered with SQLAlchemy
from .user.models import User
from .world.models import World, WorldMember
from .character.models import Character
from .spellcasting.models import Spell
from .enemy.models import EnemyTemplate
from .session.models import GameSession, SessionParticipant
from .combat.models import Combatant
from .event.models import SessionEvent

# Import routers
from .user.router import router as user_router
from .world.router import router as world_router
from .character.router import router as character_router
from .spellcasting.router import router as spell_router
from .spellcasting.router import slots_router as spell_slots_router
from .enemy.router import router as enemy_router
from .session.router import router as session_router
from .combat.router import router as combat_router
from .combat.router import catalog_router as combat_catalog_router
from .event.router import router as event_router
from .realtime.router import router as realtime_router

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("mythweaver")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"{settings.app_name} ready")
    yield


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="""
## Tabletop RPG Combat Tracker API

Backend for running D&D 5e encounters at a virtual table:

- **Worlds & Sessions**: A DM opens sessions in a world; members join with their characters
- **Characters**: Player characters with HP and class-derived spell slots
- **Enemies**: Reusable enemy templates, snapshotted into combat
- **Combat**: Initiative order, rounds and per-turn action economy
- **Spells**: Spell catalog; casting levelled spells spends slots
- **Events**: Persisted session log, pollable or pushed over WebSocket

### Combat flow
1. Add combatants with `POST /sessions/{id}/combat`
2. Start with `POST /sessions/{id}/combat/start`
3. Take actions with `POST /sessions/{id}/combat/actions`
4. Pass the turn with `POST /sessions/{id}/combat/turn`
5. Finish with `DELETE /sessions/{id}/combat`

Write endpoints expect the acting user's id in the `X-User-Id` header.
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Add CORS middleware for webapp support
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(user_router)
app.include_router(world_router)
app.include_router(character_router)
app.include_router(spell_router)
app.include_router(spell_slots_router)
app.include_router(enemy_router)
app.include_router(session_router)
app.include_router(combat_router)
app.include_router(combat_catalog_router)
app.include_router(event_router)
app.include_router(realtime_router)


@app.get("/", tags=["root"])
def root():
    """API root - returns basic info."""
    return {
        "name": settings.app_name,
        "version": "1.0.0",
        "docs": "/docs",
    }


@app.get("/health", tags=["root"])
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
