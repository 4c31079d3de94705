from datetime import datetime

from sounddream.core.db import SessionLocal, engine, Base
from sounddream.models.music import Artist, Album, Track, User, TrackLike, LibraryEntry, PersonalPlay

# Simple development seeding script. Run:  python -m sounddream.dev_seed

def run():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        has = db.query(Track).first()
        if has:
            print("Tracks already exist; skip seeding.")
            return
        artist = Artist(name="Demo Artist", is_public=True)
        hidden = Artist(name="Private Demo Artist", is_public=False)
        db.add_all([artist, hidden])
        db.flush()
        album = Album(title="Demo Album", artist_id=artist.id)
        db.add(album)
        db.flush()
        tracks = []
        for i in range(1, 21):
            owner = hidden if i % 10 == 0 else artist
            t = Track(
                title=f"Demo Track {i}",
                artist_id=owner.id,
                album_id=album.id if i <= 10 else None,
                audio_url=f"/static/audio/{i}.mp3",
                plays=1000 - i * 37,
            )
            db.add(t)
            tracks.append(t)
        users = [User(email=f"listener{i}@example.com", display_name=f"Listener {i}") for i in range(1, 6)]
        db.add_all(users)
        db.flush()
        # overlapping tastes so neighbourhoods are non-trivial
        for u_idx, user in enumerate(users):
            for t in tracks[u_idx:u_idx + 5]:
                db.add(TrackLike(user_id=user.id, track_id=t.id))
            db.add(LibraryEntry(user_id=user.id, track_id=tracks[u_idx + 6].id))
            db.add(PersonalPlay(user_id=user.id, track_id=tracks[u_idx + 8].id, count=7, last_played_at=datetime.utcnow()))
        db.commit()
        print(f"Seeded {len(tracks)} demo tracks and {len(users)} listeners.")
    finally:
        db.close()

if __name__ == "__main__":
    run()
