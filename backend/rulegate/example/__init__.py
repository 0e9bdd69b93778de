"""Worked example: a login form whose password rules depend on who is logging in."""

from rulegate.example.login import Login, LoginState, Password, UserName

__all__ = ["Login", "LoginState", "Password", "UserName"]
