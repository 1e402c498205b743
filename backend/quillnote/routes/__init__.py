# Routes package init
"""
Quillnote Backend — API Routes Package
========================================

Route Inventory:
    - notes.py:   POST   /api/notes                  (create)
                  GET    /api/notes                  (list, cursor pagination)
                  GET    /api/notes/{id}             (detail)
                  PUT    /api/notes/{id}             (partial update)
                  DELETE /api/notes/{id}             (delete)
                  POST   /api/notes/{id}/summarize   (LLM summary, cached on the note)
    - health.py:  GET    /health, /api/health        (service health check)

Routes stay thin: parse the request, call NoteService, shape the response.
"""
