from __future__ import annotations

from typing import Any

from loyalty_admin.clients.loyalty_sdk.modules.base import BaseClient


class ThemeClient(BaseClient):
    def get_colors(self) -> dict[str, Any]:
        return self._request("GET", "/api/theme/colors")

    def update_colors(self, colors: dict[str, Any]) -> dict[str, Any]:
        return self._request("PUT", "/api/theme/colors", json_body={"colors": colors})

    def list_presets(self) -> dict[str, Any]:
        return self._request("GET", "/api/theme/presets")

    def create_preset(self, name: str, colors: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/api/theme/presets", json_body={"name": name, "colors": colors})

    def apply_preset(self, preset_id: str | int) -> dict[str, Any]:
        return self._request("PUT", f"/api/theme/presets/{preset_id}/apply")

    def delete_preset(self, preset_id: str | int) -> dict[str, Any]:
        return self._request("DELETE", f"/api/theme/presets/{preset_id}")
