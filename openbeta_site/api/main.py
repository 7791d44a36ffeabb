from fastapi import FastAPI

from openbeta_site.api.routes import router

app = FastAPI(title="OpenBeta site content")
app.include_router(router)
