# Force SQLModel table registration at test discovery time
# so every table exists before the test database is created
from app.models.match import Match  # noqa: F401
from app.models.play_session import PlaySession  # noqa: F401
from app.models.player import Player  # noqa: F401
from app.models.rating_history import RatingHistory  # noqa: F401
from app.models.registration import Registration  # noqa: F401
