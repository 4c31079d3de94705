"""Start the recommendation API under uvicorn.

Host and port come from API_HOST / API_PORT unless given on the command line;
auto-reload follows APP_DEBUG and uvicorn logs at the configured LOG_LEVEL.
Usage:
  python run_api.py --port 8100 --no-reload
"""
import argparse
import os
from pathlib import Path

import uvicorn

from sounddream.core.config import get_settings


def main():
  settings = get_settings()
  parser = argparse.ArgumentParser(description=f"Run {settings.app_name}")
  parser.add_argument('--host', default=os.getenv('API_HOST', '127.0.0.1'))
  parser.add_argument('--port', type=int, default=int(os.getenv('API_PORT', '8000')))
  parser.add_argument('--reload', dest='reload', action='store_true')
  parser.add_argument('--no-reload', dest='reload', action='store_false')
  parser.set_defaults(reload=settings.debug)
  args = parser.parse_args()

  uvicorn.run(
    "sounddream.main:app",
    host=args.host,
    port=args.port,
    reload=args.reload,
    reload_dirs=[str(Path(__file__).parent / 'sounddream')] if args.reload else None,
    log_level=settings.log_level.lower(),
  )


if __name__ == '__main__':
  main()
