"""
haulbook.ui
~~~~~~~~~~~
Web API (FastAPI) and its uvicorn launcher. Install with ``pip install haulbook[ui]``.
"""
