# Routes package init
"""
Spacetime Backend: API Routes Package
======================================

Route Inventory:
    - auth.py:      POST   /register            (GitHub code → JWT)
    - upload.py:    POST   /upload              (store cover media)
    - memories.py:  GET    /memories            (caller's memories, excerpted)
                    GET    /memories/{id}       (single memory)
                    POST   /memories            (create)
                    PUT    /memories/{id}       (replace)
                    DELETE /memories/{id}       (remove)
    - health.py:    GET    /health              (service health check)

Routes stay thin: extract request data, call a service, shape the response.
"""
