from flask import Blueprint

loan_bp = Blueprint('loan_bp', __name__)

from .loan_controller import *
