"""
Kazi Mashinani - job marketplace dashboard connecting rural job seekers
and employers in Kenya.

Core package: REST client for the backend, application state store,
authentication flow and dashboard controllers. The Flask UI lives in
the sibling ``frontend`` package.
"""
