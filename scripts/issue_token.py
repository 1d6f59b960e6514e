"""Emite un access token de prueba para un usuario existente.

Uso típico:
  PYTHONPATH=. python scripts/issue_token.py 665f1c2e8b3e4a0012345678
  PYTHONPATH=. python scripts/issue_token.py u1 --minutes 5 --no-check

Por defecto verifica en Mongo que el usuario exista antes de firmar.
Requiere JWT_SECRET en el entorno o en .env.
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import timedelta

from app.core.config import settings
from app.infrastructure.db.mongo_async import close_async_db, get_async_db
from app.infrastructure.security.token_service import TokenService
from app.repositories.user_repo import UserRepository


async def _user_exists(user_id: str) -> bool:
    try:
        return await UserRepository(get_async_db(settings)).get_user_by_id(user_id) is not None
    finally:
        close_async_db()


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Firma un JWT de acceso para un user id")
    ap.add_argument("user_id", help="_id del usuario (ObjectId o string)")
    ap.add_argument("--minutes", type=int, default=None, help="Vigencia en minutos (default: settings)")
    ap.add_argument("--no-check", action="store_true", help="No verificar que el usuario exista")
    args = ap.parse_args(argv)

    if not settings.jwt_configured:
        print("JWT_SECRET no configurado", file=sys.stderr)
        return 2

    if not args.no_check and not asyncio.run(_user_exists(args.user_id)):
        print(f"Usuario no encontrado: {args.user_id}", file=sys.stderr)
        return 1

    tokens = TokenService.from_settings(settings)
    expires_in = timedelta(minutes=args.minutes) if args.minutes is not None else None
    print(tokens.create_access_token(args.user_id, expires_in=expires_in))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
