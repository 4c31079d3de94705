"""
Print the profile and recommendations computed for one listener.

Usage:
  python tools/debug_recommend.py 42
  python tools/debug_recommend.py 42 --top-n 10 --candidate-limit 500
"""
from __future__ import annotations
import argparse
import os
import sys
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from sounddream.core.config import RecommendationSettings, get_settings
from sounddream.core.db import SessionLocal
from sounddream.services.interaction_store import SqlInteractionStore
from sounddream.services.profile_builder import ProfileBuilder
from sounddream.services.recommendation_service import RecommendationService


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument('listener_id', type=int)
    parser.add_argument('--top-n', type=int, default=None)
    parser.add_argument('--candidate-limit', type=int, default=None)
    args = parser.parse_args()

    overrides = {}
    if args.top_n is not None:
        overrides['top_n'] = args.top_n
    if args.candidate_limit is not None:
        overrides['candidate_limit'] = args.candidate_limit
    config = RecommendationSettings.model_validate({**get_settings().recommendation.model_dump(), **overrides})

    session = SessionLocal()
    try:
        store = SqlInteractionStore(session)
        profile, known = ProfileBuilder(config).build(store, args.listener_id)
        print(f"listener={args.listener_id} known_tracks={len(known)}")
        for tid, weight in sorted(profile.items(), key=lambda kv: (-kv[1], kv[0])):
            print(f"  track={tid} weight={weight:g}")

        recs = RecommendationService(config).recommend(store, args.listener_id)
        label = 'personalised' if any(r.score > 0 for r in recs) else 'fallback (most played)'
        print(f"recommendations: {label}")
        for r in recs:
            artist = r.metadata.artist.name if r.metadata.artist else '-'
            print(f"  id={r.track_id} score={r.score:.4f} plays={r.metadata.plays} title={r.metadata.title} artist={artist}")
    finally:
        session.close()

if __name__ == '__main__':
    main()
