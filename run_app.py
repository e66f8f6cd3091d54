# run_app.py
import os
import uvicorn

def start_api_server():
    """
    API sunucusunu uvicorn ile başlatır. Adres ve port .env üzerinden değiştirilebilir.
    """
    host = os.getenv("API_HOST", "127.0.0.1")
    port = int(os.getenv("API_PORT", "8001"))
    reload = os.getenv("API_RELOAD", "false").lower() == "true"
    uvicorn.run("ihracat_api.api_ana:app", host=host, port=port, reload=reload)

if __name__ == "__main__":
    start_api_server()
