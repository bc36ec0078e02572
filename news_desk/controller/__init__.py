"""
Controller Module

View mode and refresh orchestration.
"""
from news_desk.controller.view import Browsing, CompanyFocus, ViewController, ViewMode

__all__ = [
    "Browsing",
    "CompanyFocus",
    "ViewController",
    "ViewMode",
]
