# Services package init
"""
Quillnote Backend — Services Layer
====================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).

Service Inventory:
    - NoteService: CRUD rules and the summarize-and-cache workflow
    - LLMService (abstract): Interface for summarization providers
    - OpenAIService / GeminiService: Concrete providers
    - CircuitBreaker: Failure isolation shared by the providers
    - llm_factory.get_llm_service(): Provider selection from settings
"""
