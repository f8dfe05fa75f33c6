# Routes package init
"""
DevConnect Backend — API Routes Package
=========================================

What:  HTTP route handlers that accept requests and return responses.
How:   Each route module handles one area of the API.

Route Inventory:
    - auth.py:      POST /signup, /login, /logout
    - profile.py:   GET /profile/view, PATCH /profile/edit, /profile/password,
                    DELETE /profile
    - requests.py:  POST /request/send/{status}/{receiver_id}
                    POST /request/review/{status}/{request_id}
    - user.py:      GET /user/feed, /user/requests/received,
                    /user/requests/connections, /user?email=
    - health.py:    GET /health

Routes stay thin: extract inputs, resolve the caller, call a service,
wrap the result in the {"message", "data"} envelope.
"""
