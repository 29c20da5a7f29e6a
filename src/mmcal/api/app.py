from fastapi import FastAPI
from mmcal.api.public import router as public_router

app = FastAPI(title="naytak public api")
app.include_router(public_router)
