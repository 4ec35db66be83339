from app.db.models.member import Member
from app.db.models.catalog import Event, Service, Yacht
from app.db.models.booking import YachtBooking
from app.db.models.token_transaction import TokenTransaction

__all__ = ["Member", "Yacht", "Service", "Event", "YachtBooking", "TokenTransaction"]
