"""
Album API: Routes Package
==========================

Route Inventory:
    - health.py:  GET  /ping              (fixed liveness payload)
                  GET  /health            (store reachability)
    - albums.py:  GET  /albums            (list all albums)
                  GET  /albums/{id}       (single album)
                  POST /albums            (add an album)

Handlers stay thin: parse the request, make one store call, return the
result. Errors are mapped to status codes by the handlers in main.py.
"""
