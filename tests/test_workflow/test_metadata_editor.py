"""Tests for the editor workflow and command line interface."""

import json
from datetime import datetime

import pytest
import yaml

from src.main import main
from src.metadata import GeoCoordinate
from src.workflow import INTENTS, MetadataEditor

@pytest.fixture
def editor(sample_config):
    return MetadataEditor(sample_config)

@pytest.fixture
def config_file(temp_dir, sample_config):
    path = temp_dir / 'config.yaml'
    path.write_text(yaml.safe_dump(sample_config), encoding='utf-8')
    return path

@pytest.fixture
def raw_file(temp_dir, sample_raw):
    path = temp_dir / 'photo.json'
    path.write_text(json.dumps(sample_raw), encoding='utf-8')
    return path

class TestMetadataEditor:
    """Test cases for MetadataEditor."""

    def test_components_follow_config(self, sample_config):
        """Test display and mutation settings reach the components."""
        sample_config['display']['exposure_max_denominator'] = 100
        sample_config['display']['sequence_separator'] = ', '
        editor = MetadataEditor(sample_config)

        assert editor.formatter.max_denominator == 100
        assert editor.formatter.sequence_separator == ', '
        assert editor.mutator.software == 'TestSoftware'

    def test_load_json_dump(self, editor, raw_file, sample_raw):
        """Test a JSON dump loads as a raw map."""
        assert editor.load(raw_file) == sample_raw

    def test_load_rejects_non_object(self, editor, temp_dir):
        """Test a JSON dump must hold an object."""
        path = temp_dir / 'list.json'
        path.write_text('[1, 2]', encoding='utf-8')

        with pytest.raises(ValueError):
            editor.load(path)

    def test_save(self, editor, temp_dir, sample_raw):
        """Test save returns the JSON text and writes it when asked."""
        output = temp_dir / 'out' / 'edited.json'
        text = editor.save(sample_raw, output)

        assert json.loads(text) == sample_raw
        assert json.loads(output.read_text(encoding='utf-8')) == sample_raw

    def test_inspect(self, editor, sample_raw):
        """Test inspect builds a snapshot."""
        snapshot = editor.inspect(sample_raw)

        assert snapshot.timestamp == '2024.03.25'
        assert snapshot.coordinate == GeoCoordinate(-37.7, -122.4)

    def test_apply_intents(self, editor, sample_raw):
        """Test every intent dispatches to the matching edit."""
        results = {
            'set-date': editor.apply(sample_raw, 'set-date', date=datetime(2020, 1, 1)),
            'delete-date': editor.apply(sample_raw, 'delete-date'),
            'set-gps': editor.apply(sample_raw, 'set-gps', coordinate=GeoCoordinate(1.0, 2.0)),
            'delete-gps': editor.apply(sample_raw, 'delete-gps'),
            'strip': editor.apply(sample_raw, 'strip'),
            'set-field': editor.apply(sample_raw, 'set-field', field='Artist', value='Jane'),
            'delete-field': editor.apply(sample_raw, 'delete-field', field='Model'),
        }

        assert set(results) == set(INTENTS)
        assert results['set-date']['{Exif}']['DateTimeOriginal'] == '2020:01:01 00:00:00'
        assert 'DateTimeOriginal' not in results['delete-date']['{Exif}']
        assert results['set-gps']['{GPS}']['LatitudeRef'] == 'N'
        assert '{GPS}' not in results['delete-gps']
        assert set(results['strip']) == {'Orientation', '{TIFF}'}
        assert results['set-field']['{IPTC}'] == {'By-line': 'Jane'}
        assert 'Model' not in results['delete-field']['{TIFF}']
        for edited in results.values():
            assert edited['{TIFF}']['Software'] == 'TestSoftware'

    def test_apply_missing_argument(self, editor, sample_raw):
        """Test set intents require their value."""
        with pytest.raises(ValueError):
            editor.apply(sample_raw, 'set-date')
        with pytest.raises(ValueError):
            editor.apply(sample_raw, 'set-gps')

    def test_apply_field_arguments(self, editor, sample_raw):
        """Test field intents require a field, and set-field a value."""
        with pytest.raises(ValueError):
            editor.apply(sample_raw, 'set-field', field='Artist')
        with pytest.raises(ValueError):
            editor.apply(sample_raw, 'delete-field')

    def test_field_edit_rejects_timestamp(self, editor, sample_raw):
        """Test the timestamp can only change through the date intents."""
        with pytest.raises(ValueError, match='DateTimeOriginal'):
            editor.apply(sample_raw, 'set-field', field='DateTimeOriginal', value='2020:01:01 00:00:00')

    def test_apply_unknown_intent(self, editor, sample_raw):
        """Test unknown intents are rejected."""
        with pytest.raises(ValueError, match='Unknown edit intent'):
            editor.apply(sample_raw, 'rotate')

class TestCommandLine:
    """Test cases for the photo-metadata command."""

    def test_no_command(self, capsys):
        """Test help is printed without a command."""
        assert main([]) == 0
        assert 'usage' in capsys.readouterr().out

    def test_show_json(self, capsys, raw_file, config_file):
        """Test show --json prints the snapshot."""
        code = main(['show', str(raw_file), '--config', str(config_file), '--json'])
        snapshot = json.loads(capsys.readouterr().out)

        assert code == 0
        assert snapshot['groups']['Shooting']['ExposureTime'] == '1/250s'
        assert snapshot['groups']['Shooting']['FNumber'] == 'f/2.8'
        assert snapshot['timestamp'] == '2024.03.25'
        assert snapshot['coordinate'] == {'latitude': -37.7, 'longitude': -122.4}

    def test_show_text(self, capsys, raw_file, config_file):
        """Test show prints groups, date and location."""
        assert main(['show', str(raw_file), '--config', str(config_file)]) == 0
        out = capsys.readouterr().out

        assert 'Device:' in out
        assert '  Make: Apple' in out
        assert 'Date: 2024.03.25' in out
        assert 'Location: -37.7000, -122.4000' in out

    def test_set_gps_to_stdout(self, capsys, raw_file, config_file):
        """Test an edit prints the edited map when no output is given."""
        code = main(['set-gps', str(raw_file), '51.5', '-0.12', '--config', str(config_file)])
        edited = json.loads(capsys.readouterr().out)

        assert code == 0
        assert edited['{GPS}'] == {
            'LatitudeRef': 'N', 'Latitude': 51.5,
            'LongitudeRef': 'W', 'Longitude': 0.12
        }

    def test_set_date_to_file(self, capsys, raw_file, config_file, temp_dir):
        """Test an edit is written to the output file."""
        output = temp_dir / 'edited.json'
        code = main([
            'set-date', str(raw_file), '2021-06-30 08:15:00',
            '-o', str(output), '--config', str(config_file)
        ])

        assert code == 0
        assert str(output) in capsys.readouterr().out
        edited = json.loads(output.read_text(encoding='utf-8'))
        assert edited['{Exif}']['DateTimeOriginal'] == '2021:06:30 08:15:00'

    def test_strip(self, capsys, raw_file, config_file):
        """Test strip keeps only orientation and the stamp."""
        assert main(['strip', str(raw_file), '--config', str(config_file)]) == 0
        edited = json.loads(capsys.readouterr().out)

        assert edited['Orientation'] == 6
        assert set(edited['{TIFF}']) == {'Software', 'DateTime'}

    def test_invalid_date(self, raw_file, config_file):
        """Test an unparseable date is a usage error."""
        with pytest.raises(SystemExit) as exc_info:
            main(['set-date', str(raw_file), 'yesterday', '--config', str(config_file)])
        assert exc_info.value.code == 2

    def test_invalid_coordinate(self, capsys, raw_file, config_file):
        """Test an out-of-range coordinate fails with exit code 1."""
        code = main(['set-gps', str(raw_file), '95', '10', '--config', str(config_file)])

        assert code == 1
        assert 'Error' in capsys.readouterr().err

    def test_missing_source(self, capsys, temp_dir, config_file):
        """Test a missing input file fails with exit code 1."""
        code = main(['show', str(temp_dir / 'missing.json'), '--config', str(config_file)])

        assert code == 1
        assert 'Error' in capsys.readouterr().err

    def test_set_field(self, capsys, raw_file, config_file):
        """Test set-field writes text values and mirrors rights fields."""
        code = main(['set-field', str(raw_file), 'Copyright', '(c) 2024 Jane', '--config', str(config_file)])
        edited = json.loads(capsys.readouterr().out)

        assert code == 0
        assert edited['{TIFF}']['Copyright'] == '(c) 2024 Jane'
        assert edited['{IPTC}']['CopyrightNotice'] == '(c) 2024 Jane'

    def test_set_field_decodes_numbers(self, capsys, raw_file, config_file):
        """Test JSON-looking values are stored as numbers and lists."""
        assert main(['set-field', str(raw_file), 'FNumber', '1.8', '--config', str(config_file)]) == 0
        assert json.loads(capsys.readouterr().out)['{Exif}']['FNumber'] == 1.8

        assert main(['set-field', str(raw_file), 'ISOSpeedRatings', '[400]', '--config', str(config_file)]) == 0
        assert json.loads(capsys.readouterr().out)['{Exif}']['ISOSpeedRatings'] == [400]

    def test_delete_field(self, capsys, raw_file, config_file):
        """Test delete-field removes the field."""
        assert main(['delete-field', str(raw_file), 'LensModel', '--config', str(config_file)]) == 0
        edited = json.loads(capsys.readouterr().out)

        assert 'LensModel' not in edited['{Exif}']

    def test_set_field_reserved(self, capsys, raw_file, config_file):
        """Test reserved fields fail with exit code 1."""
        code = main(['set-field', str(raw_file), 'Location', 'home', '--config', str(config_file)])

        assert code == 1
        assert 'dedicated edit operations' in capsys.readouterr().err
