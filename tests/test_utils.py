"""
Test suite de utilidades: User-Agent, formato de fechas y reglas del conserje.
"""
from datetime import date

import pytest

from app.services.booking_service import concierge_flags, is_concierge_rest_day, is_short_notice
from app.utils.formatting import apartment_label, format_date_es, join_es, meal_label
from app.utils.user_agent import detect_browser, detect_device_type

CHROME_DESKTOP = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)
EDGE_DESKTOP = CHROME_DESKTOP + " Edg/120.0.2210.91"
ANDROID_PHONE = (
    "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Mobile Safari/537.36"
)
ANDROID_TABLET = (
    "Mozilla/5.0 (Linux; Android 13; SM-X700) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)
IPAD = "Mozilla/5.0 (iPad; CPU OS 17_0 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.0 Safari/604.1"

# 2025-03-03 es lunes
TODAY = date(2025, 3, 3)


class TestUserAgent:

    @pytest.mark.parametrize(
        "ua,device",
        [
            (CHROME_DESKTOP, "desktop"),
            (ANDROID_PHONE, "mobile"),
            (ANDROID_TABLET, "tablet"),
            (IPAD, "tablet"),
            ("", "desktop"),
        ],
    )
    def test_tipo_de_dispositivo(self, ua, device):
        assert detect_device_type(ua) == device

    @pytest.mark.parametrize(
        "ua,browser",
        [
            (CHROME_DESKTOP, "Chrome"),
            (EDGE_DESKTOP, "Edge"),
            (IPAD, "Safari"),
            ("Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0", "Firefox"),
            ("curl/8.4.0", "Unknown"),
        ],
    )
    def test_navegador(self, ua, browser):
        assert detect_browser(ua) == browser


class TestFormato:

    def test_fecha_sin_ceros(self):
        assert format_date_es(date(2025, 3, 7)) == "7/3/2025"

    def test_turnos(self):
        assert meal_label("lunch") == "comida"
        assert meal_label("both") == "comida y cena"

    def test_locales(self):
        assert apartment_label(12) == "12"
        assert apartment_label(43) == "43 (L1)"
        assert apartment_label(48) == "48 (L6)"

    def test_enumeracion(self):
        assert join_es([1]) == "1"
        assert join_es([1, 2, 3]) == "1, 2 y 3"


class TestReglasDelConserje:

    def test_dias_de_descanso(self):
        assert is_concierge_rest_day(date(2025, 3, 4))  # martes
        assert is_concierge_rest_day(date(2025, 3, 5))  # miércoles
        assert not is_concierge_rest_day(date(2025, 3, 7))  # viernes

    def test_poca_antelacion(self):
        assert is_short_notice(date(2025, 3, 7), TODAY)
        assert not is_short_notice(date(2025, 3, 8), TODAY)

    def test_viernes_con_antelacion(self):
        assert concierge_flags(date(2025, 3, 14), preparar_fuego=True, today=TODAY) == (False, True)

    def test_descanso_anula_el_fuego(self):
        """
        GIVEN: Reserva para un martes con fuego
        WHEN: Se calculan los avisos
        THEN: Sin limpieza y sin preparación de fuego
        """
        assert concierge_flags(date(2025, 3, 11), preparar_fuego=True, today=TODAY) == (True, False)

    def test_poca_antelacion_conserva_el_fuego(self):
        assert concierge_flags(date(2025, 3, 7), preparar_fuego=True, today=TODAY) == (True, True)

    def test_sin_limpieza_solicitada(self):
        assert concierge_flags(
            date(2025, 3, 14), preparar_fuego=False, no_cleaning_requested=True, today=TODAY
        ) == (True, False)
