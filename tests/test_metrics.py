from owm_exporter.config import Units
from owm_exporter.metrics import MetricsBuilder, format_value, render_metrics
from owm_exporter.models import Failed, Ready, Reading, Unavailable


def _lines(text):
    return text.splitlines()


def test_builder_orders_labels_and_appends_global_labels():
    builder = MetricsBuilder([("location", "home")])
    builder.add("owm_rain_volume", 0.5, period="1h", unit="mm")
    builder.add("owm_error", 0)

    assert builder.render() == (
        'owm_rain_volume{period="1h",unit="mm",location="home"} 0.5\n'
        'owm_error{location="home"} 0\n'
    )


def test_builder_omits_empty_label_block():
    assert MetricsBuilder().add("owm_error", 1).render() == "owm_error 1\n"


def test_builder_escapes_label_values():
    text = MetricsBuilder().add("owm_condition", 1, kind='say "hi"\\\n').render()
    assert text == 'owm_condition{kind="say \\"hi\\"\\\\\\n"} 1\n'


def test_unavailable_renders_nothing():
    assert render_metrics(Unavailable(), Units.METRIC) == ""
    assert render_metrics(Unavailable(), Units.METRIC, location="home") == ""


def test_failure_without_status_has_one_line():
    assert render_metrics(Failed(status=None), Units.KELVIN) == "owm_error 1\n"


def test_failure_with_status_adds_code_line():
    assert _lines(render_metrics(Failed(status=503), Units.KELVIN)) == [
        "owm_error 1",
        'owm_error{code="503"} 1',
    ]


def test_failure_lines_carry_location():
    assert _lines(render_metrics(Failed(status=401), Units.KELVIN, location="lab")) == [
        'owm_error{location="lab"} 1',
        'owm_error{code="401",location="lab"} 1',
    ]


def test_ready_metric_units(london_reading):
    text = render_metrics(Ready(reading=london_reading), Units.METRIC)

    assert _lines(text) == [
        "owm_error 0",
        'owm_temp{unit="c"} 10.0',
        'owm_temp_min{unit="c"} 8.5',
        'owm_temp_max{unit="c"} 11.2',
        'owm_feels_like{unit="c"} 9.1',
        'owm_humidity{unit="percent"} 80.0',
        'owm_pressure{unit="hPa"} 1012.0',
        'owm_clouds_all{unit="percent"} 90',
        'owm_wind_direction{unit="degrees"} 180',
        'owm_wind_speed{unit="m/s"} 3.2',
        'owm_condition{kind="overcast clouds"} 1',
    ]


def test_ready_kelvin_and_imperial_labels(london_reading):
    kelvin = render_metrics(Ready(reading=london_reading), Units.KELVIN)
    imperial = render_metrics(Ready(reading=london_reading), Units.IMPERIAL)

    assert 'owm_temp{unit="k"} 10.0\n' in kelvin
    assert 'owm_wind_speed{unit="m/s"} 3.2\n' in kelvin
    assert 'owm_temp{unit="f"} 10.0\n' in imperial
    assert 'owm_wind_speed{unit="mph"} 3.2\n' in imperial
    assert 'owm_pressure{unit="hPa"} 1012.0\n' in imperial


def test_no_precipitation_lines_without_volumes(london_reading):
    text = render_metrics(Ready(reading=london_reading), Units.METRIC)
    assert "owm_rain_volume" not in text
    assert "owm_snow_volume" not in text
    assert "owm_visibility" not in text


def test_single_rain_volume_and_visibility(rainy_reading):
    lines = _lines(render_metrics(Ready(reading=rainy_reading), Units.IMPERIAL, location="seattle"))

    rain = [line for line in lines if line.startswith("owm_rain_volume")]
    assert rain == ['owm_rain_volume{period="1h",unit="mm",location="seattle"} 1.78']
    assert not [line for line in lines if line.startswith("owm_snow_volume")]
    assert lines[-1] == 'owm_visibility{unit="meters",location="seattle"} 4000'


def test_each_condition_gets_its_own_line(rainy_reading):
    lines = _lines(render_metrics(Ready(reading=rainy_reading), Units.IMPERIAL))
    assert [line for line in lines if line.startswith("owm_condition")] == [
        'owm_condition{kind="moderate rain"} 1',
        'owm_condition{kind="mist"} 1',
    ]


def test_all_precipitation_periods_in_order(london_payload):
    london_payload["rain"] = {"3h": 2.5, "1h": 0.4}
    london_payload["snow"] = {"3h": 1.0}
    reading = Reading.model_validate(london_payload)

    lines = _lines(render_metrics(Ready(reading=reading), Units.METRIC))
    precipitation = [line for line in lines if "_volume" in line]
    assert precipitation == [
        'owm_rain_volume{period="1h",unit="mm"} 0.4',
        'owm_rain_volume{period="3h",unit="mm"} 2.5',
        'owm_snow_volume{period="3h",unit="mm"} 1.0',
    ]


def test_every_line_carries_location(rainy_reading):
    lines = _lines(render_metrics(Ready(reading=rainy_reading), Units.METRIC, location="seattle"))
    assert lines
    assert all(line.rsplit(" ", 1)[0].endswith('location="seattle"}') for line in lines)


def test_rendering_is_deterministic(rainy_reading):
    outcome = Ready(reading=rainy_reading)
    assert render_metrics(outcome, Units.METRIC, "x") == render_metrics(outcome, Units.METRIC, "x")


def test_values_render_in_natural_python_form():
    assert format_value(80.0) == "80.0"
    assert format_value(1012.0) == "1012.0"
    assert format_value(3.2) == "3.2"
    assert format_value(90) == "90"
    assert format_value(float("nan")) == "NaN"
    assert format_value(float("-inf")) == "-Inf"
