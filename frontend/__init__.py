"""
Kazi Mashinani web frontend - Flask pages and JSON routes for the
bilingual job marketplace dashboard, plus the server-side auth proxy.
"""
