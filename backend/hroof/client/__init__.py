from .events import EventRegistry, Subscription
from .session import RoomSession
from .transport import ApiTransport, HttpTransport
