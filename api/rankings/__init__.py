from flask import Blueprint
import logging


rankings_bp = Blueprint('rankings', __name__)

logger = logging.getLogger(__name__)

from . import (
    get_rankings,
    export_rankings,
    get_scored_events,
)

__all__ = ['rankings_bp']
