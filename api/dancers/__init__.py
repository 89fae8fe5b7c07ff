from flask import Blueprint
import logging


dancers_bp = Blueprint('dancers', __name__)

logger = logging.getLogger(__name__)

from . import (
    mark_registration_paid,
    mark_registration_unpaid,
    get_registration_status,
    check_registration_status,
    mark_group_registration_paid,
)

__all__ = ['dancers_bp']
