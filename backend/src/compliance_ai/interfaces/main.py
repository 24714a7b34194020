from ..infrastructure.app_factory import create_application
from ..infrastructure.config.settings import get_settings
from ..interfaces.api import router as api_router

settings = get_settings()

app = create_application(
    router=api_router,
    settings=settings,
    summary="Compliance document analysis with interchangeable AI providers",
    description="""
    # Compliance AI API

    Upload a compliance document and get back a structured analysis:

    * **Summary**: What the document is about
    * **Key points**: The findings worth remembering
    * **Action suggestions**: Recommended follow-ups that can be ticked off

    ## Providers

    The analysis is produced by Claude, Gemini or Mistral. The active provider and
    the API keys live in the `parameter` resource and can be changed at runtime.
    """,
    openapi_tags=[
        {"name": "Documents", "description": "Upload, analysis and management of documents"},
        {"name": "Key Points", "description": "Findings extracted from documents"},
        {"name": "Action Suggestions", "description": "Recommended actions and their completion state"},
        {"name": "Parameters", "description": "Runtime configuration such as provider API keys"},
    ],
)
