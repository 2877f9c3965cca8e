"""
Unit tests for the output sink registry.
"""

import io
import json
import sys

import linelog
from linelog import sinks
from linelog.sinks import NOOP, StdStream, write_line


class BrokenSink:
    def write(self, data):
        raise OSError('disk full')


class TestRegistry:
    """Test sink getters, setters and reset"""

    def test_defaults_are_process_streams(self):
        """Should fall back to sys.stdout and sys.stderr"""
        assert sinks.get_out() is sys.stdout
        assert sinks.get_err() is sys.stderr

    def test_set_and_reset(self):
        """Should replace sinks and restore the defaults on reset"""
        a, b = io.StringIO(), io.StringIO()
        sinks.set_out(a)
        sinks.set_err(b)

        assert sinks.get_out() is a
        assert sinks.get_err() is b

        sinks.reset()
        assert sinks.get_out() is sys.stdout
        assert sinks.get_err() is sys.stderr

    def test_silence(self):
        """Should point both sinks at the discard sink"""
        sinks.silence()

        assert sinks.get_out() is NOOP
        assert sinks.get_err() is NOOP

    def test_redirect_restores_previous(self):
        """Should swap sinks inside the block only"""
        before = io.StringIO()
        sinks.set_out(before)
        inner = io.StringIO()

        with sinks.redirect(out=inner):
            assert sinks.get_out() is inner
            assert sinks.get_err() is sys.stderr

        assert sinks.get_out() is before

    def test_redirect_restores_on_exception(self):
        """Should restore sinks when the block raises"""
        try:
            with sinks.redirect(err=io.StringIO()):
                raise RuntimeError('boom')
        except RuntimeError:
            pass

        assert sinks.get_err() is sys.stderr


class TestNoop:
    """Test the discard sink"""

    def test_reports_full_length(self):
        assert NOOP.write('hello') == 5
        assert NOOP.write(b'') == 0


class TestWriteLine:
    """Test write_line"""

    def test_text_sink(self):
        """Should append exactly one newline"""
        buf = io.StringIO()
        write_line(buf, '{"a": 1}')

        assert buf.getvalue() == '{"a": 1}\n'

    def test_binary_sink(self):
        """Should encode as UTF-8 for binary sinks"""
        buf = io.BytesIO()
        write_line(buf, '{"desc": "café"}')

        assert buf.getvalue() == '{"desc": "café"}\n'.encode('utf-8')

    def test_surrogates_to_binary_sink(self):
        """Should escape undecodable characters instead of dropping the line"""
        buf = io.BytesIO()
        sinks.set_out(buf)

        linelog.log('upload', 'file %s', 'report\udce9.csv')

        rec = json.loads(buf.getvalue().decode('utf-8'))
        assert rec['desc'] == 'file report\udce9.csv'

    def test_surrogates_to_utf8_file(self, tmp_path):
        path = tmp_path / 'out.jsonl'
        with open(path, 'a', encoding='utf-8') as f:
            sinks.set_out(f)
            linelog.log('upload', 'file %s', 'report\udce9.csv')

        (line,) = path.read_text(encoding='utf-8').splitlines()
        assert json.loads(line)['desc'] == 'file report\udce9.csv'

    def test_broken_sink_is_ignored(self):
        """Should not raise when the sink fails"""
        write_line(BrokenSink(), 'lost')

    def test_closed_stream_is_ignored(self):
        """Should not raise on a closed stream"""
        buf = io.StringIO()
        buf.close()

        write_line(buf, 'lost')

    def test_std_stream_follows_sys(self, capsys):
        """Should write to whatever sys.stdout is at write time"""
        write_line(StdStream('stdout'), 'hello')

        assert capsys.readouterr().out == 'hello\n'
