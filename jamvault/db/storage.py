# ============================================================================
# FILE: jamvault/db/storage.py
# ============================================================================
"""
Storage abstraction for JamVault.

`BaseStorage` is the repository interface every route handler talks to;
`MemStorage` keeps all entities in process memory. Lookups return None
(or False for removals) when a row does not exist, they never raise.
Input is expected to be validated by the caller.
"""
from abc import ABC, abstractmethod
from collections import Counter
from datetime import datetime, timedelta
from itertools import count
from typing import Callable, Dict, List, Optional
from jamvault.core.barcode import generate_song_barcode
from jamvault.core.security import generate_reset_token, get_password_hash
from jamvault.db.models.activity import (
    Favorite,
    Game,
    LibraryEntry,
    SongComment,
    UserListeningHistory,
)
from jamvault.db.models.music import Album, Artist, Song
from jamvault.db.models.playlist import Playlist, PlaylistSong
from jamvault.db.models.short_link import ShortLink
from jamvault.db.models.song_request import SongRequest, SongRequestStatus
from jamvault.db.models.user import User
from jamvault.schemas.history import TopArtist, TopGenre, TopSong, UserListeningStats
from jamvault.schemas.music import (
    AlbumCreate,
    AlbumUpdate,
    ArtistCreate,
    ArtistUpdate,
    SongCreate,
    SongUpdate,
)
from jamvault.schemas.playlist import PlaylistCreate, PlaylistUpdate
from jamvault.schemas.short_link import ShortLinkCreate
from jamvault.schemas.social import CommentCreate, GameCreate
from jamvault.schemas.song_request import SongRequestCreate
from jamvault.schemas.user import UserCreate, UserUpdate
import logging
import os
import secrets

logger = logging.getLogger(__name__)

DEFAULT_RESET_TOKEN_LIFETIME = timedelta(hours=1)
SHORT_ID_BYTES = 6  # 8 url-safe characters
TOP_SONGS_LIMIT = 10
TOP_ARTISTS_LIMIT = 5
TOP_GENRES_LIMIT = 5


class BaseStorage(ABC):
    """Repository interface: one operation per use case"""

    # Users
    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]: ...
    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]: ...
    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]: ...
    @abstractmethod
    def get_all_users(self) -> List[User]: ...
    @abstractmethod
    def create_user(self, user_data: UserCreate, is_admin: bool = False) -> User: ...
    @abstractmethod
    def update_user(self, user_id: int, update_data: UserUpdate) -> Optional[User]: ...
    @abstractmethod
    def create_password_reset_token(self, user_id: int) -> Optional[str]: ...
    @abstractmethod
    def validate_password_reset_token(self, token: str) -> Optional[User]: ...
    @abstractmethod
    def update_password(self, user_id: int, new_password: str) -> Optional[User]: ...

    # Artists and albums
    @abstractmethod
    def get_artist(self, artist_id: int) -> Optional[Artist]: ...
    @abstractmethod
    def get_artist_by_name(self, name: str) -> Optional[Artist]: ...
    @abstractmethod
    def get_all_artists(self) -> List[Artist]: ...
    @abstractmethod
    def create_artist(self, artist_data: ArtistCreate) -> Artist: ...
    @abstractmethod
    def update_artist(self, artist_id: int, update_data: ArtistUpdate) -> Optional[Artist]: ...
    @abstractmethod
    def get_album(self, album_id: int) -> Optional[Album]: ...
    @abstractmethod
    def get_all_albums(self) -> List[Album]: ...
    @abstractmethod
    def get_albums_by_artist(self, artist_id: int) -> List[Album]: ...
    @abstractmethod
    def create_album(self, album_data: AlbumCreate) -> Album: ...
    @abstractmethod
    def update_album(self, album_id: int, update_data: AlbumUpdate) -> Optional[Album]: ...

    # Songs
    @abstractmethod
    def get_song(self, song_id: int) -> Optional[Song]: ...
    @abstractmethod
    def get_song_by_barcode(self, barcode: str) -> Optional[Song]: ...
    @abstractmethod
    def get_all_songs(self) -> List[Song]: ...
    @abstractmethod
    def get_songs_by_user(self, user_id: int) -> List[Song]: ...
    @abstractmethod
    def get_songs_by_artist(self, artist_id: int) -> List[Song]: ...
    @abstractmethod
    def get_recent_songs(self, limit: int = 10) -> List[Song]: ...
    @abstractmethod
    def search_songs(self, query: str) -> List[Song]: ...
    @abstractmethod
    def create_song(self, user_id: int, song_data: SongCreate, file_path: str) -> Song: ...
    @abstractmethod
    def update_song(self, song_id: int, update_data: SongUpdate) -> Optional[Song]: ...
    @abstractmethod
    def update_song_lyrics(self, song_id: int, lyrics: str) -> Optional[Song]: ...
    @abstractmethod
    def increment_play_count(self, song_id: int) -> Optional[Song]: ...
    @abstractmethod
    def delete_song(self, song_id: int) -> bool: ...

    # Playlists
    @abstractmethod
    def get_playlist(self, playlist_id: int) -> Optional[Playlist]: ...
    @abstractmethod
    def get_playlists_by_user(self, user_id: int) -> List[Playlist]: ...
    @abstractmethod
    def create_playlist(self, user_id: int, playlist_data: PlaylistCreate) -> Playlist: ...
    @abstractmethod
    def update_playlist(self, playlist_id: int, update_data: PlaylistUpdate) -> Optional[Playlist]: ...
    @abstractmethod
    def delete_playlist(self, playlist_id: int) -> bool: ...
    @abstractmethod
    def add_collaborator(self, playlist_id: int, user_id: int) -> Optional[Playlist]: ...
    @abstractmethod
    def remove_collaborator(self, playlist_id: int, user_id: int) -> Optional[Playlist]: ...
    @abstractmethod
    def get_playlist_songs(self, playlist_id: int) -> List[Song]: ...
    @abstractmethod
    def get_playlist_song_rows(self, playlist_id: int) -> List[PlaylistSong]: ...
    @abstractmethod
    def get_song_playlist_rows(self, song_id: int) -> List[PlaylistSong]: ...
    @abstractmethod
    def add_song_to_playlist(self, playlist_id: int, song_id: int, added_by: Optional[int] = None) -> PlaylistSong: ...
    @abstractmethod
    def remove_song_from_playlist(self, playlist_id: int, song_id: int) -> bool: ...

    # Favorites and library
    @abstractmethod
    def get_favorites_by_user(self, user_id: int) -> List[Song]: ...
    @abstractmethod
    def get_song_favorite_rows(self, song_id: int) -> List[Favorite]: ...
    @abstractmethod
    def add_to_favorites(self, user_id: int, song_id: int) -> Favorite: ...
    @abstractmethod
    def remove_from_favorites(self, user_id: int, song_id: int) -> bool: ...
    @abstractmethod
    def is_favorite(self, user_id: int, song_id: int) -> bool: ...
    @abstractmethod
    def get_library_songs(self, user_id: int) -> List[Song]: ...
    @abstractmethod
    def add_to_library(self, user_id: int, song_id: int) -> LibraryEntry: ...
    @abstractmethod
    def remove_from_library(self, user_id: int, song_id: int) -> bool: ...
    @abstractmethod
    def is_in_library(self, user_id: int, song_id: int) -> bool: ...

    # Comments
    @abstractmethod
    def get_comment(self, comment_id: int) -> Optional[SongComment]: ...
    @abstractmethod
    def get_song_comments(self, song_id: int) -> List[SongComment]: ...
    @abstractmethod
    def create_comment(self, song_id: int, user_id: int, comment_data: CommentCreate) -> SongComment: ...
    @abstractmethod
    def delete_comment(self, comment_id: int) -> bool: ...

    # Listening history
    @abstractmethod
    def record_listen(self, user_id: int, song_id: int, duration: int = 0) -> UserListeningHistory: ...
    @abstractmethod
    def get_user_history(self, user_id: int, limit: Optional[int] = None) -> List[UserListeningHistory]: ...
    @abstractmethod
    def get_user_listening_stats(self, user_id: int) -> UserListeningStats: ...

    # Games
    @abstractmethod
    def create_game(self, user_id: int, game_data: GameCreate) -> Game: ...
    @abstractmethod
    def get_games_by_user(self, user_id: int) -> List[Game]: ...
    @abstractmethod
    def get_leaderboard(self, game_type: Optional[str] = None, limit: int = 10) -> List[Game]: ...

    # Song requests
    @abstractmethod
    def get_song_request(self, request_id: int) -> Optional[SongRequest]: ...
    @abstractmethod
    def get_song_requests_by_user(self, user_id: int) -> List[SongRequest]: ...
    @abstractmethod
    def get_all_song_requests(self) -> List[SongRequest]: ...
    @abstractmethod
    def get_pending_song_requests(self) -> List[SongRequest]: ...
    @abstractmethod
    def create_song_request(self, user_id: int, request_data: SongRequestCreate) -> SongRequest: ...
    @abstractmethod
    def update_song_request_status(
        self, request_id: int, status: SongRequestStatus, admin_message: Optional[str] = None
    ) -> Optional[SongRequest]: ...
    @abstractmethod
    def delete_song_request(self, request_id: int) -> bool: ...

    # Short links
    @abstractmethod
    def get_short_link(self, link_id: int) -> Optional[ShortLink]: ...
    @abstractmethod
    def get_short_link_by_short_id(self, short_id: str) -> Optional[ShortLink]: ...
    @abstractmethod
    def get_short_links_by_user(self, user_id: int) -> List[ShortLink]: ...
    @abstractmethod
    def create_short_link(self, user_id: int, link_data: ShortLinkCreate) -> ShortLink: ...
    @abstractmethod
    def increment_short_link_clicks(self, short_id: str) -> Optional[ShortLink]: ...
    @abstractmethod
    def delete_short_link(self, link_id: int) -> bool: ...


class MemStorage(BaseStorage):
    """In-process storage backed by dicts and per-entity id counters"""

    def __init__(
        self,
        clock: Callable[[], datetime] = datetime.utcnow,
        reset_token_lifetime: timedelta = DEFAULT_RESET_TOKEN_LIFETIME,
    ):
        self.clock = clock
        self.reset_token_lifetime = reset_token_lifetime

        self.users: Dict[int, User] = {}
        self.artists: Dict[int, Artist] = {}
        self.albums: Dict[int, Album] = {}
        self.songs: Dict[int, Song] = {}
        self.playlists: Dict[int, Playlist] = {}
        self.playlist_songs: Dict[int, PlaylistSong] = {}
        self.favorites: Dict[int, Favorite] = {}
        self.library: Dict[int, LibraryEntry] = {}
        self.comments: Dict[int, SongComment] = {}
        self.history: Dict[int, UserListeningHistory] = {}
        self.games: Dict[int, Game] = {}
        self.song_requests: Dict[int, SongRequest] = {}
        self.short_links: Dict[int, ShortLink] = {}

        # Counters never hand out a freed id again
        self._ids = {
            name: count(1)
            for name in (
                "user", "artist", "album", "song", "playlist", "playlist_song",
                "favorite", "library", "comment", "history", "game",
                "song_request", "short_link",
            )
        }

    def _next_id(self, entity: str) -> int:
        return next(self._ids[entity])

    def seed_default_users(self, admin_password: str, user_password: str) -> None:
        """Create the built-in admin and regular accounts"""
        self.create_user(UserCreate.model_construct(username="admin", password=admin_password), is_admin=True)
        self.create_user(UserCreate.model_construct(username="user", password=user_password))
        logger.info("Seeded default users: admin, user")

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def get_user(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.username == username), None)

    def get_user_by_email(self, email: str) -> Optional[User]:
        if not email:
            return None
        email = email.lower()
        return next((u for u in self.users.values() if u.email and u.email.lower() == email), None)

    def get_all_users(self) -> List[User]:
        return list(self.users.values())

    def create_user(self, user_data: UserCreate, is_admin: bool = False) -> User:
        """Create a user, hashing the password before it is stored"""
        user = User(
            id=self._next_id("user"),
            username=user_data.username,
            password=get_password_hash(user_data.password),
            email=str(user_data.email) if user_data.email else None,
            display_name=user_data.display_name or user_data.username,
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            is_admin=is_admin,
            stats={"totalPlays": 0, "totalTime": 0},
            created_at=self.clock(),
        )
        self.users[user.id] = user
        logger.info(f"User created: {user.username} (id={user.id})")
        return user

    def update_user(self, user_id: int, update_data: UserUpdate) -> Optional[User]:
        user = self.users.get(user_id)
        if not user:
            return None
        updates = update_data.model_dump(exclude_unset=True)
        if updates.get("email") is not None:
            updates["email"] = str(updates["email"])
        updated = user.model_copy(update=updates)
        self.users[user_id] = updated
        return updated

    def create_password_reset_token(self, user_id: int) -> Optional[str]:
        """Attach a fresh reset token valid for `reset_token_lifetime` and return it"""
        user = self.users.get(user_id)
        if not user:
            return None
        token = generate_reset_token()
        self.users[user_id] = user.model_copy(update={
            "reset_token": token,
            "reset_token_expiry": self.clock() + self.reset_token_lifetime,
        })
        logger.info(f"Password reset token issued for user {user_id}")
        return token

    def validate_password_reset_token(self, token: str) -> Optional[User]:
        """Return the owner of a matching, unexpired token; None otherwise"""
        if not token:
            return None
        now = self.clock()
        for user in self.users.values():
            if user.reset_token == token and user.reset_token_expiry and user.reset_token_expiry > now:
                return user
        return None

    def update_password(self, user_id: int, new_password: str) -> Optional[User]:
        user = self.users.get(user_id)
        if not user:
            return None
        updated = user.model_copy(update={
            "password": get_password_hash(new_password),
            "reset_token": None,
            "reset_token_expiry": None,
        })
        self.users[user_id] = updated
        logger.info(f"Password updated for user {user_id}")
        return updated

    # ------------------------------------------------------------------
    # Artists and albums
    # ------------------------------------------------------------------
    def get_artist(self, artist_id: int) -> Optional[Artist]:
        return self.artists.get(artist_id)

    def get_artist_by_name(self, name: str) -> Optional[Artist]:
        name = name.lower()
        return next((a for a in self.artists.values() if a.name.lower() == name), None)

    def get_all_artists(self) -> List[Artist]:
        return list(self.artists.values())

    def create_artist(self, artist_data: ArtistCreate) -> Artist:
        artist = Artist(
            id=self._next_id("artist"),
            created_at=self.clock(),
            **artist_data.model_dump(),
        )
        self.artists[artist.id] = artist
        logger.info(f"Artist created: {artist.name} (id={artist.id})")
        return artist

    def update_artist(self, artist_id: int, update_data: ArtistUpdate) -> Optional[Artist]:
        artist = self.artists.get(artist_id)
        if not artist:
            return None
        updated = artist.model_copy(update=update_data.model_dump(exclude_unset=True))
        self.artists[artist_id] = updated
        return updated

    def get_album(self, album_id: int) -> Optional[Album]:
        return self.albums.get(album_id)

    def get_all_albums(self) -> List[Album]:
        return list(self.albums.values())

    def get_albums_by_artist(self, artist_id: int) -> List[Album]:
        return [a for a in self.albums.values() if a.artist_id == artist_id]

    def create_album(self, album_data: AlbumCreate) -> Album:
        album = Album(
            id=self._next_id("album"),
            track_count=0,
            created_at=self.clock(),
            **album_data.model_dump(),
        )
        self.albums[album.id] = album
        logger.info(f"Album created: {album.title} (id={album.id})")
        return album

    def update_album(self, album_id: int, update_data: AlbumUpdate) -> Optional[Album]:
        album = self.albums.get(album_id)
        if not album:
            return None
        updated = album.model_copy(update=update_data.model_dump(exclude_unset=True))
        self.albums[album_id] = updated
        return updated

    def _adjust_track_count(self, album_id: Optional[int], delta: int) -> None:
        album = self.albums.get(album_id) if album_id is not None else None
        if album:
            self.albums[album.id] = album.model_copy(
                update={"track_count": max(0, album.track_count + delta)}
            )

    # ------------------------------------------------------------------
    # Songs
    # ------------------------------------------------------------------
    def get_song(self, song_id: int) -> Optional[Song]:
        return self.songs.get(song_id)

    def get_song_by_barcode(self, barcode: str) -> Optional[Song]:
        return next((s for s in self.songs.values() if s.barcode == barcode), None)

    def get_all_songs(self) -> List[Song]:
        return list(self.songs.values())

    def get_songs_by_user(self, user_id: int) -> List[Song]:
        return [s for s in self.songs.values() if s.user_id == user_id]

    def get_songs_by_artist(self, artist_id: int) -> List[Song]:
        return [
            s for s in self.songs.values()
            if s.artist_id == artist_id or artist_id in s.featured_artist_ids
        ]

    def get_recent_songs(self, limit: int = 10) -> List[Song]:
        songs = sorted(self.songs.values(), key=lambda s: s.uploaded_at, reverse=True)
        return songs[:limit]

    def search_songs(self, query: str) -> List[Song]:
        """Case-insensitive match on title, artist, album and genre"""
        needle = query.strip().lower()
        if not needle:
            return []
        return [
            s for s in self.songs.values()
            if any(needle in (value or "").lower() for value in (s.title, s.artist, s.album, s.genre))
        ]

    def _unique_barcode(self, title: str, artist: str) -> str:
        existing = {s.barcode for s in self.songs.values()}
        barcode = generate_song_barcode(title, artist)
        while barcode in existing:
            barcode = generate_song_barcode(title, artist)
        return barcode

    def create_song(self, user_id: int, song_data: SongCreate, file_path: str) -> Song:
        song = Song(
            id=self._next_id("song"),
            user_id=user_id,
            file_path=file_path,
            play_count=0,
            uploaded_at=self.clock(),
            barcode=self._unique_barcode(song_data.title, song_data.artist),
            **song_data.model_dump(),
        )
        self.songs[song.id] = song
        self._adjust_track_count(song.album_id, 1)
        logger.info(f"Song created: {song.title} (id={song.id}, barcode={song.barcode})")
        return song

    def update_song(self, song_id: int, update_data: SongUpdate) -> Optional[Song]:
        song = self.songs.get(song_id)
        if not song:
            return None
        updated = song.model_copy(update=update_data.model_dump(exclude_unset=True))
        if updated.album_id != song.album_id:
            self._adjust_track_count(song.album_id, -1)
            self._adjust_track_count(updated.album_id, 1)
        self.songs[song_id] = updated
        return updated

    def update_song_lyrics(self, song_id: int, lyrics: str) -> Optional[Song]:
        song = self.songs.get(song_id)
        if not song:
            return None
        updated = song.model_copy(update={"lyrics": lyrics})
        self.songs[song_id] = updated
        return updated

    def increment_play_count(self, song_id: int) -> Optional[Song]:
        song = self.songs.get(song_id)
        if not song:
            return None
        updated = song.model_copy(update={"play_count": (song.play_count or 0) + 1})
        self.songs[song_id] = updated
        return updated

    def delete_song(self, song_id: int) -> bool:
        """
        Delete a song and everything that hangs off it: playlist rows,
        favorites, library entries and comments. The audio file is removed
        last; a failure there is logged and does not undo the deletion.
        """
        song = self.songs.pop(song_id, None)
        if not song:
            return False

        for rows in (self.playlist_songs, self.favorites, self.library, self.comments):
            for row_id in [rid for rid, row in rows.items() if row.song_id == song_id]:
                del rows[row_id]
        self._adjust_track_count(song.album_id, -1)

        try:
            if song.file_path and os.path.exists(song.file_path):
                os.remove(song.file_path)
        except OSError as e:
            logger.error(f"Error deleting file for song {song_id}: {e}")

        logger.info(f"Song deleted: {song_id}")
        return True

    # ------------------------------------------------------------------
    # Playlists
    # ------------------------------------------------------------------
    def get_playlist(self, playlist_id: int) -> Optional[Playlist]:
        return self.playlists.get(playlist_id)

    def get_playlists_by_user(self, user_id: int) -> List[Playlist]:
        """Playlists the user owns or collaborates on"""
        return [
            p for p in self.playlists.values()
            if p.user_id == user_id or user_id in p.collaborators
        ]

    def create_playlist(self, user_id: int, playlist_data: PlaylistCreate) -> Playlist:
        playlist = Playlist(
            id=self._next_id("playlist"),
            user_id=user_id,
            collaborators=[],
            created_at=self.clock(),
            **playlist_data.model_dump(),
        )
        self.playlists[playlist.id] = playlist
        logger.info(f"Playlist created: {playlist.id} for user {user_id}")
        return playlist

    def update_playlist(self, playlist_id: int, update_data: PlaylistUpdate) -> Optional[Playlist]:
        playlist = self.playlists.get(playlist_id)
        if not playlist:
            return None
        updated = playlist.model_copy(update=update_data.model_dump(exclude_unset=True))
        self.playlists[playlist_id] = updated
        logger.info(f"Playlist updated: {playlist_id}")
        return updated

    def delete_playlist(self, playlist_id: int) -> bool:
        if self.playlists.pop(playlist_id, None) is None:
            return False
        for row_id in [rid for rid, row in self.playlist_songs.items() if row.playlist_id == playlist_id]:
            del self.playlist_songs[row_id]
        logger.info(f"Playlist deleted: {playlist_id}")
        return True

    def add_collaborator(self, playlist_id: int, user_id: int) -> Optional[Playlist]:
        playlist = self.playlists.get(playlist_id)
        if not playlist:
            return None
        collaborators = list(playlist.collaborators)
        if user_id not in collaborators:
            collaborators.append(user_id)
        updated = playlist.model_copy(update={"collaborators": collaborators, "is_collaborative": True})
        self.playlists[playlist_id] = updated
        return updated

    def remove_collaborator(self, playlist_id: int, user_id: int) -> Optional[Playlist]:
        playlist = self.playlists.get(playlist_id)
        if not playlist:
            return None
        if user_id not in playlist.collaborators:
            return playlist
        updated = playlist.model_copy(
            update={"collaborators": [uid for uid in playlist.collaborators if uid != user_id]}
        )
        self.playlists[playlist_id] = updated
        return updated

    def get_playlist_song_rows(self, playlist_id: int) -> List[PlaylistSong]:
        return [ps for ps in self.playlist_songs.values() if ps.playlist_id == playlist_id]

    def get_song_playlist_rows(self, song_id: int) -> List[PlaylistSong]:
        return [ps for ps in self.playlist_songs.values() if ps.song_id == song_id]

    def get_playlist_songs(self, playlist_id: int) -> List[Song]:
        rows = self.get_playlist_song_rows(playlist_id)
        return [self.songs[ps.song_id] for ps in rows if ps.song_id in self.songs]

    def _find_playlist_song(self, playlist_id: int, song_id: int) -> Optional[PlaylistSong]:
        return next(
            (ps for ps in self.playlist_songs.values()
             if ps.playlist_id == playlist_id and ps.song_id == song_id),
            None,
        )

    def add_song_to_playlist(self, playlist_id: int, song_id: int, added_by: Optional[int] = None) -> PlaylistSong:
        """Add a song to a playlist; an existing pair is returned unchanged"""
        existing = self._find_playlist_song(playlist_id, song_id)
        if existing:
            logger.info(f"Song already in playlist {playlist_id}: {song_id}")
            return existing

        playlist_song = PlaylistSong(
            id=self._next_id("playlist_song"),
            playlist_id=playlist_id,
            song_id=song_id,
            added_by=added_by,
            added_at=self.clock(),
        )
        self.playlist_songs[playlist_song.id] = playlist_song
        logger.info(f"Song added to playlist {playlist_id}: {song_id}")
        return playlist_song

    def remove_song_from_playlist(self, playlist_id: int, song_id: int) -> bool:
        playlist_song = self._find_playlist_song(playlist_id, song_id)
        if not playlist_song:
            return False
        del self.playlist_songs[playlist_song.id]
        logger.info(f"Song removed from playlist {playlist_id}: {song_id}")
        return True

    # ------------------------------------------------------------------
    # Favorites and library
    # ------------------------------------------------------------------
    def _songs_for(self, rows) -> List[Song]:
        return [self.songs[row.song_id] for row in rows if row.song_id in self.songs]

    def _find_pair(self, rows: Dict, user_id: int, song_id: int):
        return next(
            (row for row in rows.values() if row.user_id == user_id and row.song_id == song_id),
            None,
        )

    def get_favorites_by_user(self, user_id: int) -> List[Song]:
        return self._songs_for(f for f in self.favorites.values() if f.user_id == user_id)

    def get_song_favorite_rows(self, song_id: int) -> List[Favorite]:
        return [f for f in self.favorites.values() if f.song_id == song_id]

    def add_to_favorites(self, user_id: int, song_id: int) -> Favorite:
        existing = self._find_pair(self.favorites, user_id, song_id)
        if existing:
            return existing
        favorite = Favorite(
            id=self._next_id("favorite"),
            user_id=user_id,
            song_id=song_id,
            added_at=self.clock(),
        )
        self.favorites[favorite.id] = favorite
        return favorite

    def remove_from_favorites(self, user_id: int, song_id: int) -> bool:
        favorite = self._find_pair(self.favorites, user_id, song_id)
        if not favorite:
            return False
        del self.favorites[favorite.id]
        return True

    def is_favorite(self, user_id: int, song_id: int) -> bool:
        return self._find_pair(self.favorites, user_id, song_id) is not None

    def get_library_songs(self, user_id: int) -> List[Song]:
        return self._songs_for(e for e in self.library.values() if e.user_id == user_id)

    def add_to_library(self, user_id: int, song_id: int) -> LibraryEntry:
        existing = self._find_pair(self.library, user_id, song_id)
        if existing:
            return existing
        entry = LibraryEntry(
            id=self._next_id("library"),
            user_id=user_id,
            song_id=song_id,
            added_at=self.clock(),
        )
        self.library[entry.id] = entry
        return entry

    def remove_from_library(self, user_id: int, song_id: int) -> bool:
        entry = self._find_pair(self.library, user_id, song_id)
        if not entry:
            return False
        del self.library[entry.id]
        return True

    def is_in_library(self, user_id: int, song_id: int) -> bool:
        return self._find_pair(self.library, user_id, song_id) is not None

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------
    def get_comment(self, comment_id: int) -> Optional[SongComment]:
        return self.comments.get(comment_id)

    def get_song_comments(self, song_id: int) -> List[SongComment]:
        comments = [c for c in self.comments.values() if c.song_id == song_id]
        return sorted(comments, key=lambda c: c.created_at)

    def create_comment(self, song_id: int, user_id: int, comment_data: CommentCreate) -> SongComment:
        comment = SongComment(
            id=self._next_id("comment"),
            song_id=song_id,
            user_id=user_id,
            comment=comment_data.comment,
            timestamp=comment_data.timestamp,
            created_at=self.clock(),
        )
        self.comments[comment.id] = comment
        return comment

    def delete_comment(self, comment_id: int) -> bool:
        return self.comments.pop(comment_id, None) is not None

    # ------------------------------------------------------------------
    # Listening history and stats
    # ------------------------------------------------------------------
    def record_listen(self, user_id: int, song_id: int, duration: int = 0) -> UserListeningHistory:
        """Append a history entry, bump the song's play count and the user's totals"""
        entry = UserListeningHistory(
            id=self._next_id("history"),
            user_id=user_id,
            song_id=song_id,
            listen_date=self.clock(),
            duration=duration,
        )
        self.history[entry.id] = entry
        self.increment_play_count(song_id)

        user = self.users.get(user_id)
        if user:
            stats = dict(user.stats)
            stats["totalPlays"] = stats.get("totalPlays", 0) + 1
            stats["totalTime"] = stats.get("totalTime", 0) + duration
            self.users[user_id] = user.model_copy(update={"stats": stats})
        return entry

    def get_user_history(self, user_id: int, limit: Optional[int] = None) -> List[UserListeningHistory]:
        entries = [h for h in self.history.values() if h.user_id == user_id]
        entries.sort(key=lambda h: h.listen_date, reverse=True)
        return entries[:limit] if limit else entries

    def get_user_listening_stats(self, user_id: int) -> UserListeningStats:
        """
        Aggregate a user's history into totals and top lists.

        Songs, artists and genres are counted independently in history
        order; sorting is stable, so ties keep the order in which each key
        was first counted.
        """
        entries = [h for h in self.history.values() if h.user_id == user_id]

        song_counts: Counter = Counter()
        artist_counts: Counter = Counter()
        genre_counts: Counter = Counter()
        for entry in entries:
            song_counts[entry.song_id] += 1
            song = self.songs.get(entry.song_id)
            if song is None:
                continue
            artist_counts[song.artist] += 1
            if song.genre:
                genre_counts[song.genre] += 1

        top_songs = []
        for song_id, plays in sorted(song_counts.items(), key=lambda item: item[1], reverse=True):
            song = self.songs.get(song_id)
            if song is None:
                continue
            top_songs.append(TopSong(song_id=song_id, title=song.title, artist=song.artist, play_count=plays))
            if len(top_songs) == TOP_SONGS_LIMIT:
                break

        top_artists = [
            TopArtist(artist=name, play_count=plays)
            for name, plays in sorted(artist_counts.items(), key=lambda item: item[1], reverse=True)
        ][:TOP_ARTISTS_LIMIT]
        top_genres = [
            TopGenre(genre=genre, play_count=plays)
            for genre, plays in sorted(genre_counts.items(), key=lambda item: item[1], reverse=True)
        ][:TOP_GENRES_LIMIT]

        return UserListeningStats(
            total_time=sum(h.duration for h in entries),
            total_plays=len(entries),
            top_songs=top_songs,
            top_artists=top_artists,
            top_genres=top_genres,
        )

    # ------------------------------------------------------------------
    # Games
    # ------------------------------------------------------------------
    def create_game(self, user_id: int, game_data: GameCreate) -> Game:
        game = Game(
            id=self._next_id("game"),
            user_id=user_id,
            played_at=self.clock(),
            **game_data.model_dump(),
        )
        self.games[game.id] = game
        return game

    def get_games_by_user(self, user_id: int) -> List[Game]:
        games = [g for g in self.games.values() if g.user_id == user_id]
        return sorted(games, key=lambda g: g.played_at, reverse=True)

    def get_leaderboard(self, game_type: Optional[str] = None, limit: int = 10) -> List[Game]:
        games = [g for g in self.games.values() if game_type is None or g.game_type == game_type]
        return sorted(games, key=lambda g: g.score, reverse=True)[:limit]

    # ------------------------------------------------------------------
    # Song requests
    # ------------------------------------------------------------------
    def get_song_request(self, request_id: int) -> Optional[SongRequest]:
        return self.song_requests.get(request_id)

    def get_song_requests_by_user(self, user_id: int) -> List[SongRequest]:
        return [r for r in self.song_requests.values() if r.user_id == user_id]

    def get_all_song_requests(self) -> List[SongRequest]:
        return list(self.song_requests.values())

    def get_pending_song_requests(self) -> List[SongRequest]:
        return [r for r in self.song_requests.values() if r.status == SongRequestStatus.PENDING]

    def create_song_request(self, user_id: int, request_data: SongRequestCreate) -> SongRequest:
        song_request = SongRequest(
            id=self._next_id("song_request"),
            user_id=user_id,
            status=SongRequestStatus.PENDING,
            created_at=self.clock(),
            **request_data.model_dump(),
        )
        self.song_requests[song_request.id] = song_request
        logger.info(f"Song request created: {song_request.id} by user {user_id}")
        return song_request

    def update_song_request_status(
        self, request_id: int, status: SongRequestStatus, admin_message: Optional[str] = None
    ) -> Optional[SongRequest]:
        """Move a request to any status; a missing message keeps the old one"""
        song_request = self.song_requests.get(request_id)
        if not song_request:
            return None
        updates = {"status": SongRequestStatus(status)}
        if admin_message is not None:
            updates["admin_message"] = admin_message
        updated = song_request.model_copy(update=updates)
        self.song_requests[request_id] = updated
        logger.info(f"Song request {request_id} -> {updated.status.value}")
        return updated

    def delete_song_request(self, request_id: int) -> bool:
        return self.song_requests.pop(request_id, None) is not None

    # ------------------------------------------------------------------
    # Short links
    # ------------------------------------------------------------------
    def get_short_link(self, link_id: int) -> Optional[ShortLink]:
        return self.short_links.get(link_id)

    def get_short_link_by_short_id(self, short_id: str) -> Optional[ShortLink]:
        return next((l for l in self.short_links.values() if l.short_id == short_id), None)

    def get_short_links_by_user(self, user_id: int) -> List[ShortLink]:
        return [l for l in self.short_links.values() if l.user_id == user_id]

    def _unique_short_id(self) -> str:
        existing = {l.short_id for l in self.short_links.values()}
        short_id = secrets.token_urlsafe(SHORT_ID_BYTES)
        while short_id in existing:
            short_id = secrets.token_urlsafe(SHORT_ID_BYTES)
        return short_id

    def create_short_link(self, user_id: int, link_data: ShortLinkCreate) -> ShortLink:
        link = ShortLink(
            id=self._next_id("short_link"),
            short_id=self._unique_short_id(),
            user_id=user_id,
            clicks=0,
            created_at=self.clock(),
            **link_data.model_dump(),
        )
        self.short_links[link.id] = link
        return link

    def increment_short_link_clicks(self, short_id: str) -> Optional[ShortLink]:
        link = self.get_short_link_by_short_id(short_id)
        if not link:
            return None
        updated = link.model_copy(update={"clicks": link.clicks + 1})
        self.short_links[link.id] = updated
        return updated

    def delete_short_link(self, link_id: int) -> bool:
        return self.short_links.pop(link_id, None) is not None
