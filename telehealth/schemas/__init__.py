# Schemas package (re-export feature modules for stable imports)
from .auth.auth import *
from .users.user import *
from .appointments.appointment import *
from .common.common import *
