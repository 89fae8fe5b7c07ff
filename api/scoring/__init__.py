from flask import Blueprint
import logging


scoring_bp = Blueprint('scoring', __name__)

logger = logging.getLogger(__name__)

from . import (
    submit_score,
    validate_score,
    get_performance_scores,
    remove_score,
    get_scoring_config,
)

__all__ = ['scoring_bp']
