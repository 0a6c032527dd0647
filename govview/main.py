from fastapi import Depends

from govview import config
from govview.lib.fastapi import app
from govview.routes.governance import router as governance_router, verify_network

app.include_router(governance_router)
for version in config.API_VERSIONS:
    app.include_router(
        governance_router,
        prefix=f"/{version}/{{network}}",
        dependencies=[Depends(verify_network)],
    )


def run():
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=3000)


if __name__ == "__main__":
    run()
