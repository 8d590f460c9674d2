import os
import logging
from pathlib import Path
from typing import Optional, Union

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, StrictInt
from dotenv import load_dotenv

from minefield.difficulty import Difficulty
from minefield.sessions import InMemorySessions

load_dotenv(dotenv_path=Path('.env.local'))

API_BASE = "/api/minefield"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


def choose_sessions() -> InMemorySessions:
    seed = os.getenv("MINEFIELD_RNG_SEED")
    return InMemorySessions(rng_seed=int(seed) if seed else None)


class StartBody(BaseModel):
    difficulty: Optional[Union[StrictInt, str]] = None


class MoveBody(BaseModel):
    row: int = Field(..., ge=0)
    col: int = Field(..., ge=0)


def create_app(sessions=None) -> FastAPI:
    app = FastAPI(title="Minefield Service", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"]
    )

    app.state.sessions = sessions or choose_sessions()

    @app.on_event("startup")
    async def _log_config():
        klass = app.state.sessions.__class__.__name__
        logging.getLogger("uvicorn.error").info(
            f"[minefield] Sessions={klass} MINEFIELD_RNG_SEED={os.getenv('MINEFIELD_RNG_SEED') or '-'} "
            f"DEFAULT_DIFFICULTY={os.getenv('DEFAULT_DIFFICULTY') or '-'}"
        )

    def get_user_id(req: Request) -> str:
        # Cloud Run gets the stricter defaults
        is_cloud_run = bool(os.getenv("K_SERVICE") or os.getenv("K_REVISION") or os.getenv("K_CONFIGURATION"))
        trust_x_user_id = _env_flag("TRUST_X_USER_ID", "0" if is_cloud_run else "1")
        allow_anon = _env_flag("ALLOW_ANON", "0" if is_cloud_run else "1")
        default_uid = os.getenv("DEFAULT_USER_ID", "local-user")
        logger = logging.getLogger("uvicorn.error")

        iap_email = (
            req.headers.get("X-Goog-Authenticated-User-Email")
            or req.headers.get("X-Authenticated-User-Email")
            or req.headers.get("X-Forwarded-Email")
        )
        if iap_email:
            # "accounts.google.com:email@example.com"
            if ":" in iap_email:
                iap_email = iap_email.split(":", 1)[1]
            return iap_email
        forwarded_user = req.headers.get("X-Forwarded-User")
        if forwarded_user:
            return forwarded_user

        uid = req.headers.get("X-User-Id")
        if uid and trust_x_user_id:
            return uid

        if allow_anon:
            return default_uid

        logger.warning(
            f"[minefield] get_user_id missing user id is_cloud_run={int(is_cloud_run)} "
            f"trust_x_user_id={int(trust_x_user_id)} allow_anon={int(allow_anon)}"
        )
        raise HTTPException(status_code=401, detail="missing user id")

    @app.get(f"{API_BASE}/difficulties")
    def list_difficulties():
        return [
            {"level": d.level, "name": d.label, "rows": d.config.rows, "cols": d.config.cols,
             "hazards": d.config.hazards}
            for d in Difficulty
        ]

    @app.post(f"{API_BASE}/start")
    def start_game(body: StartBody, user_id: str = Depends(get_user_id)):
        difficulty = body.difficulty if body.difficulty is not None else os.getenv("DEFAULT_DIFFICULTY", "easy")
        try:
            doc = app.state.sessions.start_game(user_id, difficulty)
        except ValueError as e:
            if str(e) == "active_game_exists":
                raise HTTPException(status_code=409, detail="active game exists")
            raise HTTPException(status_code=400, detail=str(e))
        return app.state.sessions.to_client(doc) | {"game_id": user_id}

    @app.get(f"{API_BASE}/state")
    def get_state(user_id: str = Depends(get_user_id)):
        doc = app.state.sessions.get_game(user_id)
        if not doc:
            raise HTTPException(status_code=404, detail="no game")
        return app.state.sessions.to_client(doc) | {"game_id": user_id}

    @app.post(f"{API_BASE}/reveal")
    def reveal(body: MoveBody, user_id: str = Depends(get_user_id)):
        try:
            doc, move = app.state.sessions.reveal(user_id, body.row, body.col)
        except KeyError:
            raise HTTPException(status_code=404, detail="no game")
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return app.state.sessions.to_client(doc) | {"game_id": user_id, "last_move": move}

    @app.post(f"{API_BASE}/flag")
    def flag(body: MoveBody, user_id: str = Depends(get_user_id)):
        try:
            doc, _move = app.state.sessions.flag(user_id, body.row, body.col)
        except KeyError:
            raise HTTPException(status_code=404, detail="no game")
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return app.state.sessions.to_client(doc) | {"game_id": user_id}

    @app.post(f"{API_BASE}/abandon")
    def abandon(user_id: str = Depends(get_user_id)):
        try:
            doc, _move = app.state.sessions.abandon(user_id)
        except KeyError:
            raise HTTPException(status_code=404, detail="no game")
        return app.state.sessions.to_client(doc) | {"game_id": user_id}

    return app


app = create_app()
