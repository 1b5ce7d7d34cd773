#!/usr/bin/env python3
import argparse
import asyncio
import os.path
import sys
import time
from utils import params, util
from input_helper.input_aggregator import InputAggregator
from source_location.errors import SourceLocationError
from source_location.source_location_tracker import SourceLocationTracker
from reporter.simple_result import SimpleResult
import logging

logger = logging.getLogger(__name__)


def entry():
    global logger
    parser = argparse.ArgumentParser(prog="srcloc")

    parser.add_argument("artifacts", help="the file path of the solc standard json output (or hardhat build info)")
    parser.add_argument("-a", "--address", help="address of the executing contract, or a creation token", required=True)

    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("-i", "--index", help="index of the instruction in the contract code", type=int)
    group.add_argument("-s", "--step", help="step of the vm trace (requires --trace)", type=int)

    parser.add_argument("-t", "--trace", help="file path of a debug_traceTransaction result", type=str)

    code_group = parser.add_mutually_exclusive_group()
    code_group.add_argument("--rpc", help="url of the node serving eth_getCode", type=str)
    code_group.add_argument("-c", "--code", help="file path of a json object mapping addresses to code", type=str)

    parser.add_argument("-b", "--block", help="block at which the code is fetched", type=str)
    parser.add_argument("-r", "--source_root", help="directory the source file names are relative to", type=str, default="")
    parser.add_argument("-g", "--generated_sources", help="report compiler generated sources", action="store_true")
    parser.add_argument("-o", "--output", help="file path for results", type=str)
    parser.add_argument("-v", "--version", action="version", version="0.0.1")

    args = parser.parse_args()

    if args.step is not None and not args.trace:
        parser.error("--step requires --trace")

    if args.rpc:
        params.RPC_URL = args.rpc
    if args.block:
        params.BLOCK_IDENTIFIER = args.block
    if args.generated_sources:
        params.DEBUG_WITH_GENERATED_SOURCES = True

    if args.output:
        params.OUTPUT_PATH = args.output
    else:
        params.OUTPUT_PATH = os.path.join("./output", str(int(time.time())))
    if not os.path.exists(params.OUTPUT_PATH):
        os.makedirs(params.OUTPUT_PATH, exist_ok=True)

    logger = util.get_logger()

    aggregator = InputAggregator(args.artifacts, trace=args.trace, code=args.code, source_root=args.source_root)
    results = asyncio.run(locate(aggregator, args.address, index=args.index, step=args.step))
    results.write(params.OUTPUT_PATH)
    if results.get_result()['errors']:
        sys.exit(1)


async def locate(aggregator, address, index=None, step=None):
    results = SimpleResult()

    try:
        inputs = aggregator.get_aggregated_results()
        results.set_catalog(inputs['catalog'])
        tracker = SourceLocationTracker(inputs['code_manager'],
                                        debug_with_generated_sources=params.DEBUG_WITH_GENERATED_SOURCES)
        if step is not None:
            location = await tracker.get_source_location_from_vm_trace_index(address, step, inputs['catalog'])
        else:
            location = await tracker.get_source_location_from_instruction_index(address, index, inputs['catalog'])
    except SourceLocationError as e:
        logger.error(f"No source available for {address}: {e}")
        results.add_error(address, e)
        return results

    results.set_generated_sources(address, tracker.get_generated_sources_from_address(address))
    source = aggregator.get_source(inputs['catalog'].get_source_name(location.file))
    if source is not None:
        results.set_source(location.file, source)
    entry = results.add_location(address, location, step=step, index=index)

    where = entry['file_name'] or f"source #{location.file}"
    if entry['line_column'] and entry['line_column']['start']:
        where += f":{entry['line_column']['start']['line'] + 1}:{entry['line_column']['start']['column'] + 1}"
    logger.info(f"{address} -> {where} (offset {location.start}, length {location.length}, jump {location.jump})")
    return results


if __name__ == '__main__':
    entry()
