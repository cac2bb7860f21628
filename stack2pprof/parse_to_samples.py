import stack2pprof.dto as dto
import stack2pprof.parse_dto as parse_dto

UNKNOWN_PROCESS_NAME = "Unknown"


def parse_to_samples(parse_items):
    """Converts the parse items to a stream of samples, yielded as they complete."""

    images = {}  # path -> dto.Image
    processes = {}  # pid -> dto.Process
    current = None  # dto.Sample being filled

    def _process(pid):
        if pid not in processes:
            processes[pid] = dto.Process(pid, UNKNOWN_PROCESS_NAME)
        return processes[pid]

    def _image(path):
        if path is None:
            return None
        if path not in images:
            images[path] = dto.Image(path)
        return images[path]

    for item in parse_items:
        if isinstance(item, parse_dto.Image):
            images[item.path] = dto.Image(item.path, item.base, item.size, item.offset)
        elif isinstance(item, parse_dto.Process):
            processes[item.pid] = dto.Process(item.pid, item.name, item.command_line)

        elif isinstance(item, parse_dto.SampleStart):
            if current is not None:
                yield current
            current = dto.Sample(_process(item.pid), item.tid, item.timestamp)
        elif isinstance(item, parse_dto.Frame):
            if current is None:
                raise ValueError(f"FRAME outside of a sample: {item}")
            current.frames.append(
                dto.Frame(
                    address=item.address,
                    image=_image(item.image_path),
                    function_name=item.function_name,
                    file_name=item.file_name,
                    line_number=item.line_number,
                )
            )
        elif isinstance(item, parse_dto.Inline):
            if current is None or not current.frames:
                raise ValueError(f"INLINE outside of a frame: {item}")
            current.frames[-1].inlined.append(
                dto.InlineFrame(item.function_name, item.file_name, item.line_number)
            )

        else:
            raise ValueError(f"Unknown object {item}")

    if current is not None:
        yield current
