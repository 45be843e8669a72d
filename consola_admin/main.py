"""Punto de entrada de la consola.

Crea la configuración, el cliente API, los repositorios y los stores, carga
ambas colecciones y muestra el resumen del panel.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from consola_admin.core.config import APIConfig
from consola_admin.core.console import AdminConsole
from consola_admin.core.errors import StoreError
from consola_admin.exporter import export_dashboard_json, export_records_csv
from consola_admin.models.post import Post
from consola_admin.models.user import User

logger = logging.getLogger("consola_admin")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="consola-admin",
        description="Carga usuarios y publicaciones y muestra el resumen del panel.",
    )
    parser.add_argument("--api-url", help="URL base del servicio (CONSOLA_API_URL)")
    parser.add_argument("--timeout", type=float, help="Timeout HTTP en segundos")
    parser.add_argument(
        "--export-dir", type=Path, help="Carpeta donde exportar CSV y JSON"
    )
    parser.add_argument(
        "--recientes", type=int, default=5, help="Publicaciones recientes a mostrar"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log en DEBUG")
    return parser


def build_config(args: argparse.Namespace) -> APIConfig:
    config = APIConfig.from_env()
    if args.api_url:
        config = replace(config, base_url=args.api_url)
    if args.timeout is not None:
        config = replace(config, timeout=args.timeout)
    return config


def format_summary(console: AdminConsole, recent: int) -> str:
    stats = console.dashboard(recent=recent)
    lineas = [
        f"Usuarios:               {stats.total_users}",
        f"Publicaciones:          {stats.total_posts}",
        f"Edad promedio:          {stats.average_age:.1f}",
        f"Publicaciones/usuario:  {stats.posts_per_user:.1f}",
        "",
        "Publicaciones recientes:",
    ]
    if not stats.recent_posts:
        lineas.append("  (sin publicaciones)")
    for post in stats.recent_posts:
        lineas.append(f"  - {post.title} | {console.author_of(post)} | {post.created_at}")
    return "\n".join(lineas)


def export_all(console: AdminConsole, directory: Path, recent: int) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    export_records_csv(directory / "usuarios.csv", console.users.records, User)
    export_records_csv(directory / "publicaciones.csv", console.posts.records, Post)
    export_dashboard_json(directory / "dashboard.json", console.dashboard(recent))
    logger.info("Exportación completada en %s", directory)


async def run(console: AdminConsole, recent: int, export_dir: Optional[Path]) -> int:
    if not await console.check_connection():
        logger.error("El servicio no responde en %s", console.api_client.config.base_url)
        return 1
    try:
        await console.refresh_all()
    except StoreError as exc:
        logger.error("No se pudieron cargar los datos: %s", exc)
        return 1

    print(format_summary(console, recent))
    if export_dir is not None:
        export_all(console, export_dir, recent)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Arranca la consola con las dependencias configuradas."""

    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config = build_config(args)
    except ValueError as exc:
        logger.error("%s", exc)
        return 2

    console = AdminConsole.from_config(config)
    return asyncio.run(run(console, args.recientes, args.export_dir))


if __name__ == "__main__":  # pragma: no cover - punto de entrada interactivo
    sys.exit(main())
