# Services package init
"""
Bulletin Board API — Services Layer
=====================================

What:  Everything that talks to storage or to a vendor.
How:   Services take validated pydantic models and return pydantic models or
       plain dicts; they raise bulletin.exceptions errors and never build
       HTTP responses. Route handlers in bulletin.routes call them.

Service Inventory:
    - PostService: listings and responses (one statement per call)
    - AnalysisProvider (abstract): prompt + first image → model reply
    - OpenAIAnalysisService / GeminiAnalysisService: concrete providers
    - MediaService: Cloudinary upload and delete
"""
