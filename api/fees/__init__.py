from flask import Blueprint
import logging


fees_bp = Blueprint('fees', __name__)

logger = logging.getLogger(__name__)

from . import calculate_fee

__all__ = ['fees_bp']
