import json
import os
from input_helper.source_map import convert_offset_to_line_column


class SimpleResult:
    def __init__(self):
        self.results = {
            'locations': [],
            'generated_sources': {},
            'errors': []
        }
        self.catalog = None
        self.sources = {}
        self.generated_sources = {}

    def set_catalog(self, catalog):
        self.catalog = catalog

    def set_source(self, file_id, source):
        self.sources[file_id] = source

    def set_generated_sources(self, address, generated_sources):
        if generated_sources is not None:
            self.generated_sources[address] = generated_sources
            self.results['generated_sources'][address] = [source.to_json() for source in generated_sources]

    def add_location(self, address, location, step=None, index=None):
        entry = {
            'address': address,
            'step': step,
            'index': index,
            'location': location._asdict(),
            'file_name': None,
            'line_column': None,
            'content': None
        }
        if self.catalog is not None:
            entry['file_name'] = self.catalog.get_source_name(location.file, self.generated_sources.get(address))
        source = self.sources.get(location.file)
        if source is not None:
            entry['line_column'] = convert_offset_to_line_column(location, source.line_break_positions)
            entry['content'] = source.get_content_with_location(location)
        self.results['locations'].append(entry)
        return entry

    def add_error(self, address, error):
        self.results['errors'].append(f"{address}: {error}")

    def get_result(self):
        return self.results

    def write(self, output_path):
        with open(os.path.join(output_path, "results.json"), "w") as f:
            f.write(json.dumps(self.results, indent=4))
