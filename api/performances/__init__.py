from flask import Blueprint
import logging


performances_bp = Blueprint('performances', __name__)

logger = logging.getLogger(__name__)

from . import (
    withdraw_performance,
    update_performance,
)

__all__ = ['performances_bp']
