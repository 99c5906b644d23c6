import sys

from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError

from app.config import get_settings
from app.infrastructure.database import database_status, list_tables


def check_database() -> bool:
    settings = get_settings()
    print(f"🔌 Conectando a {make_url(settings.DATABASE_URL).render_as_string(hide_password=True)}")

    if database_status() != "connected":
        print("❌ No se pudo conectar a la base de datos")
        return False
    print("✅ Conexión exitosa")

    try:
        tables = list_tables()
    except SQLAlchemyError as e:
        print(f"❌ Error listando tablas: {e}")
        return False

    if not tables:
        print("⚠️ No hay tablas. Inicie la API una vez para crearlas.")
    for table in tables:
        print(f"   - {table}")
    return True


if __name__ == "__main__":
    sys.exit(0 if check_database() else 1)
