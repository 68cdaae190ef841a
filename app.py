import os

from progress import create_app, list_routes

app = create_app()

if __name__ == "__main__":
    if os.environ.get("LIST_ROUTES"):
        list_routes(app)
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)), debug=os.environ.get("FLASK_DEBUG") == "1")
