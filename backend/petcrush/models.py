"""Import every ORM model so ``Base.metadata`` knows all tables."""

from petcrush.domains.user.models import User
from petcrush.domains.pet.models import Pet
from petcrush.domains.match.models import Like, Match, Message
from petcrush.domains.report.models import Report
from petcrush.domains.adoption.models import AdoptionPost
from petcrush.domains.auth.models import OtpCode

__all__ = ["User", "Pet", "Like", "Match", "Message", "Report", "AdoptionPost", "OtpCode"]
