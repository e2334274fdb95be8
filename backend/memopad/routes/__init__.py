# Routes package init
"""
MemoPad Backend — API Routes Package
=====================================

Route Inventory:
    - memo.py:    GET    /memo/              (list memos in the title envelope)
                  POST   /memo/submit/       (create a memo)
                  GET    /memo/edit/{id}     (read one memo)
                  GET    /memo/delete/{id}   (read one memo)
                  DELETE /memo/delete/{id}   (remove one memo)
    - health.py:  GET    /health             (service health check)

Routes are thin: read the request, call the MemoStore, shape the response.
Failures are raised, never formatted here.
"""
