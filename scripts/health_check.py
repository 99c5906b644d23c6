import sys

import requests


def health_check(base_url: str = "http://localhost:3000") -> bool:
    url = f"{base_url.rstrip('/')}/health"
    print(f"🔍 Verificando {url} ...")

    try:
        resp = requests.get(url, timeout=10)
    except requests.RequestException as e:
        print(f"❌ No se pudo conectar: {e}")
        return False

    if resp.status_code != 200:
        print(f"❌ Respuesta inesperada: HTTP {resp.status_code}")
        return False

    data = resp.json()
    print(f"   Estado:        {data.get('status')}")
    print(f"   Base de datos: {data.get('database')}")
    print(f"   Uptime:        {data.get('uptime')}s")
    for name, stats in (data.get("caches") or {}).items():
        print(f"   Caché {name}: {stats.get('size')} entradas")

    healthy = data.get("status") == "healthy"
    print("✅ Servicio saludable" if healthy else "⚠️ Servicio degradado")
    return healthy


if __name__ == "__main__":
    target = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:3000"
    sys.exit(0 if health_check(target) else 1)
