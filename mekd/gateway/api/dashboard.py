"""
MEKD dashboard page.

One input per indicator, as-you-type formatting through /api/normalize,
computation on the button or Enter, results and a dual-axis Chart.js
chart. The page keeps a single chart and destroys it before drawing the
next one.
"""
import html
import json
from string import Template
from typing import Any, Dict

from starlette.responses import HTMLResponse

CHART_JS_URL = "https://cdn.jsdelivr.net/npm/chart.js"

PAGE = Template('''<!DOCTYPE html>
<html lang="id">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>MEKD - Model Estimasi Korupsi Daerah</title>
    <script src="$chart_js_url"></script>
    <style>
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body { font-family: system-ui, -apple-system, sans-serif; background: #f3f4f6; color: #1f2937; }
        .nav { background: #1f2937; padding: 15px 20px; color: white; font-size: 18px; font-weight: 600; }
        .main { max-width: 960px; margin: 0 auto; padding: 30px 20px; }
        .card { background: white; border-radius: 12px; padding: 24px; margin-bottom: 20px; box-shadow: 0 1px 3px rgba(0,0,0,0.1); }
        .card h2 { font-size: 18px; margin-bottom: 16px; color: #374151; }
        .grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(260px, 1fr)); gap: 14px; }
        label { display: block; font-size: 13px; color: #4b5563; margin-bottom: 4px; }
        label small { color: #9ca3af; }
        input, select { width: 100%; padding: 8px 10px; border: 1px solid #d1d5db; border-radius: 8px; font-size: 14px; }
        button { margin-top: 18px; background: #3b82f6; color: white; border: 0; border-radius: 8px; padding: 10px 22px; font-size: 15px; cursor: pointer; }
        .result { font-size: 22px; font-weight: 600; margin: 6px 0 14px; }
        .chart-box { position: relative; height: 300px; }
    </style>
</head>
<body>
    <div class="nav">MEKD - Model Estimasi Korupsi Daerah</div>
    <div class="main">
        <div class="card">
            <h2>Indikator Daerah</h2>
            <div class="grid">
$fields
            </div>
            <button type="button" onclick="hitung()">Hitung</button>
        </div>
        <div class="card">
            <h2>Hasil</h2>
            <label>Estimasi Korupsi</label>
            <div class="result" id="hasilKorupsi">-</div>
            <label>Estimasi IPM</label>
            <div class="result" id="hasilIpm">-</div>
            <div class="chart-box"><canvas id="hasilChart"></canvas></div>
        </div>
    </div>
    <script>
        const FIELD_IDS = $field_ids;
        const LOCALE_FIELD_IDS = $locale_field_ids;
        let chart = null;

        function normalizeField(el) {
            const sent = el.value;
            fetch("/api/normalize", {
                method: "POST",
                headers: {"Content-Type": "application/json"},
                body: JSON.stringify({text: sent})
            })
                .then(resp => resp.json())
                .then(data => {
                    // Drop stale responses if the user kept typing
                    if (el.value === sent) el.value = data.text;
                })
                .catch(err => console.warn("Normalisasi gagal:", err));
        }

        document.addEventListener("DOMContentLoaded", () => {
            LOCALE_FIELD_IDS.forEach(id => {
                const el = document.getElementById(id);
                if (!el) return;
                el.addEventListener("input", () => normalizeField(el));
                el.addEventListener("blur", () => {
                    if (el.value === "") return;
                    normalizeField(el);
                });
            });
        });

        function readForm() {
            const form = {};
            FIELD_IDS.forEach(id => {
                const el = document.getElementById(id);
                if (el) form[id] = el.value;
            });
            return form;
        }

        async function hitung() {
            let resp, data;
            try {
                resp = await fetch("/api/estimate", {
                    method: "POST",
                    headers: {"Content-Type": "application/json"},
                    body: JSON.stringify(readForm())
                });
                data = await resp.json().catch(() => ({}));
            } catch (err) {
                alert("Perhitungan gagal: server tidak dapat dihubungi.");
                return;
            }
            if (!resp.ok) {
                const detail = data.detail || {};
                alert(detail.message || "Perhitungan gagal.");
                return;
            }
            document.getElementById("hasilKorupsi").innerText = data.display.corruption;
            document.getElementById("hasilIpm").innerText = data.display.hdi_label;
            tampilkanGrafik(data.chart);
        }

        function tampilkanGrafik(config) {
            const canvas = document.getElementById("hasilChart");
            if (!canvas) return;

            config.options.scales.yKor.ticks = {
                callback: value => {
                    if (value >= 1000000000) return (value / 1000000000) + " M";
                    if (value >= 1000000) return (value / 1000000) + " Jt";
                    return value;
                }
            };
            config.options.plugins.tooltip = {
                callbacks: {
                    label: context => {
                        const label = context.dataset.label || "";
                        const value = context.parsed.y;
                        if (context.dataset.yAxisID === "yKor") {
                            return label + ": Rp " + (value ? value.toLocaleString("id-ID", {maximumFractionDigits: 2}) : "0");
                        }
                        return label + ": " + (value !== null && value !== undefined ? Number(value).toFixed(2) : "0");
                    }
                }
            };

            if (chart) {
                chart.destroy();
                chart = null;
            }
            chart = new Chart(canvas.getContext("2d"), config);
        }

        document.addEventListener("keydown", e => {
            if (e.key !== "Enter") return;
            const active = document.activeElement;
            if (active && (active.tagName === "INPUT" || active.tagName === "SELECT")) {
                e.preventDefault();
                hitung();
            }
        });
    </script>
</body>
</html>
''')


def _render_field(field_id: str, spec: Dict[str, Any]) -> str:
    label = html.escape(spec.get("label", field_id))
    unit = spec.get("unit")
    caption = f'{label} <small>({html.escape(unit)})</small>' if unit else label

    if spec.get("format") == "category":
        default = spec.get("default")
        options = "".join(
            f'<option value="{html.escape(choice)}"{" selected" if choice == default else ""}>'
            f'{html.escape(choice.capitalize())}</option>'
            for choice in spec.get("choices", [])
        )
        control = f'<select id="{field_id}" name="{field_id}">{options}</select>'
    else:
        control = f'<input type="text" inputmode="decimal" id="{field_id}" name="{field_id}" autocomplete="off">'

    return f'                <div><label for="{field_id}">{caption}</label>{control}</div>'


def render_dashboard(specs: Dict[str, Any]) -> str:
    """Dashboard HTML for the given indicator specs."""
    return PAGE.substitute(
        chart_js_url=CHART_JS_URL,
        fields="\n".join(_render_field(field_id, spec) for field_id, spec in specs.items()),
        field_ids=json.dumps(list(specs)),
        locale_field_ids=json.dumps([
            field_id for field_id, spec in specs.items() if spec.get("format", "locale") == "locale"
        ]),
    )


def dashboard_response(specs: Dict[str, Any]) -> HTMLResponse:
    return HTMLResponse(render_dashboard(specs))
