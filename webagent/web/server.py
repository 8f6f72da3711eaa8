from __future__ import annotations
import argparse
import uvicorn
from ..config import load_settings, PROFILES
from .app import create_app

def main() -> None:
    parser = argparse.ArgumentParser(description="WebAgent API locale (FastAPI)")
    parser.add_argument("--config", type=str, default="config", help="Dossier ou fichier config (par défaut: ./config)")
    parser.add_argument("--profile", type=str, choices=PROFILES, default="demo", help="Profil config (%s)" % "|".join(PROFILES))
    parser.add_argument("--host", type=str, default=None, help="Hôte (défaut: config.web.host)")
    parser.add_argument("--port", type=int, default=None, help="Port (défaut: config.web.port)")
    args = parser.parse_args()

    settings = load_settings(args.config, args.profile)
    app = create_app(settings)

    uvicorn.run(app, host=args.host or settings.web.host, port=int(args.port or settings.web.port), log_level="info")

if __name__ == "__main__":
    main()
